r"""Parameter validation utilities for the request-execution core.

This module provides validation functions for retry policy and transport
parameters so that configuration mistakes surface when the configuration
object is built, not in the middle of a retry loop.
"""

from __future__ import annotations

__all__ = ["validate_retry_policy", "validate_timeout"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx


def validate_timeout(timeout: float | httpx.Timeout) -> None:
    """Validate timeout parameter.

    Args:
        timeout: Maximum seconds to wait for server responses.
            Must be > 0 if provided as a numeric value.

    Raises:
        ValueError: If timeout is a numeric value <= 0.

    Example:
        ```pycon
        >>> from apirequest.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if isinstance(timeout, (int, float)) and timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_policy(
    num_max_retries: int,
    retry_interval_ms: float,
    retry_strategy: Callable | None = None,
) -> None:
    """Validate retry policy parameters.

    Args:
        num_max_retries: Maximum number of retries for a logical operation.
            Must be >= 0. A value of 0 means the first attempt is the only one.
        retry_interval_ms: Base retry interval in milliseconds used by the
            default exponential backoff. Must be >= 0.
        retry_strategy: Optional caller-supplied strategy. Must be callable
            if provided.

    Raises:
        ValueError: If any parameter is out of range.

    Example:
        ```pycon
        >>> from apirequest.core.validation import validate_retry_policy
        >>> validate_retry_policy(num_max_retries=5, retry_interval_ms=2000)
        >>> validate_retry_policy(num_max_retries=-1, retry_interval_ms=2000)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: num_max_retries must be >= 0, got -1

        ```
    """
    if isinstance(num_max_retries, bool) or not isinstance(num_max_retries, int):
        msg = f"num_max_retries must be an int, got {num_max_retries!r}"
        raise ValueError(msg)
    if num_max_retries < 0:
        msg = f"num_max_retries must be >= 0, got {num_max_retries}"
        raise ValueError(msg)
    if retry_interval_ms < 0:
        msg = f"retry_interval_ms must be >= 0, got {retry_interval_ms}"
        raise ValueError(msg)
    if retry_strategy is not None and not callable(retry_strategy):
        msg = f"retry_strategy must be callable, got {type(retry_strategy).__name__}"
        raise ValueError(msg)
