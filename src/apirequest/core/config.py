r"""Configuration dataclasses and defaults for request execution.

This module provides the configuration constants and the dataclass-based
configuration objects consumed by ``APIRequest``: the retry policy and
the per-request configuration that pairs a request descriptor with it.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_RETRY_INTERVAL_MS",
    "DEFAULT_TIMEOUT",
    "RETRY_RANDOMIZATION_FACTOR",
    "RequestConfig",
    "RetryPolicy",
]

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from apirequest.core.validation import validate_retry_policy, validate_timeout

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from apirequest.descriptor import RequestDescriptor
    from apirequest.retry.strategy import RetryOptions


# Maximum number of retries for a logical operation
# Total attempts = num_max_retries + 1 (initial attempt)
DEFAULT_MAX_RETRIES = 5

# Base interval for exponential backoff, in milliseconds
# 1st retry waits ~2s, 2nd ~4s, 3rd ~8s (before jitter)
DEFAULT_RETRY_INTERVAL_MS = 2000

# Transport timeout in seconds, only used when the core owns the httpx client
DEFAULT_TIMEOUT = 60.0

# Jitter range applied to the backoff: the delay is scaled by a random
# factor drawn from [1 - factor, 1 + factor)
RETRY_RANDOMIZATION_FACTOR = 0.5


@dataclass
class RetryPolicy:
    """Retry configuration for one logical operation.

    Args:
        num_max_retries: Maximum number of retries. Must be >= 0.
        retry_interval_ms: Base interval in milliseconds for the default
            exponential backoff. Must be >= 0.
        retry_strategy: Optional function overriding the default backoff.
            It receives a ``RetryOptions`` and returns the delay in
            milliseconds. Any non-numeric return value stops retrying; if
            that value is an exception it replaces the delivered error.

    Example:
        ```pycon
        >>> from apirequest.core.config import RetryPolicy
        >>> policy = RetryPolicy()
        >>> policy.num_max_retries
        5
        >>> RetryPolicy(num_max_retries=2, retry_interval_ms=100).retry_interval_ms
        100

        ```
    """

    num_max_retries: int = DEFAULT_MAX_RETRIES
    retry_interval_ms: float = DEFAULT_RETRY_INTERVAL_MS
    retry_strategy: Callable[[RetryOptions], Any] | None = None

    def __post_init__(self) -> None:
        validate_retry_policy(
            num_max_retries=self.num_max_retries,
            retry_interval_ms=self.retry_interval_ms,
            retry_strategy=self.retry_strategy,
        )


@dataclass
class RequestConfig:
    """Request-specific configuration handed to ``APIRequest``.

    Args:
        request: The already-built request descriptor.
        policy: The retry policy. Defaults to ``RetryPolicy()``.
        timeout: Transport timeout in seconds. Only used when no
            ``httpx.AsyncClient`` is supplied and the core creates one.

    Example:
        ```pycon
        >>> from apirequest.core.config import RequestConfig, RetryPolicy
        >>> from apirequest.descriptor import RequestDescriptor
        >>> config = RequestConfig(request=RequestDescriptor(url="https://api.example.com/files/1"))
        >>> config.policy.num_max_retries
        5
        >>> config.merge(policy=RetryPolicy(num_max_retries=1)).policy.num_max_retries
        1

        ```
    """

    request: RequestDescriptor
    policy: RetryPolicy = field(default_factory=RetryPolicy)
    timeout: float | httpx.Timeout = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        validate_timeout(self.timeout)

    def merge(self, **overrides: Any) -> RequestConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied; the original instance
        is left unchanged.

        Args:
            **overrides: Keyword arguments for fields to override.

        Returns:
            A new ``RequestConfig`` instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
