r"""Exponential backoff with randomized jitter."""

from __future__ import annotations

__all__ = ["ExponentialBackoff", "get_retry_timeout"]

import math
import random

from apirequest.backoff.base import BaseBackoffStrategy
from apirequest.core.config import RETRY_RANDOMIZATION_FACTOR


def get_retry_timeout(
    num_retries: int,
    base_interval_ms: float,
    randomization_factor: float = RETRY_RANDOMIZATION_FACTOR,
) -> int:
    """Calculate a jittered exponential retry timeout.

    The timeout is ``2 ** (num_retries - 1) * base_interval_ms`` scaled by
    a random factor drawn uniformly from
    ``[1 - randomization_factor, 1 + randomization_factor)`` and rounded
    up to a whole millisecond. The jitter spreads retries from many
    clients that failed at the same moment.

    Args:
        num_retries: The number of retries including the one being
            scheduled (1-indexed).
        base_interval_ms: The base interval in milliseconds.
        randomization_factor: Half-width of the jitter range.

    Returns:
        The timeout in milliseconds.

    Example:
        ```pycon
        >>> from apirequest.backoff import get_retry_timeout
        >>> get_retry_timeout(1, 2000, randomization_factor=0.0)
        2000
        >>> get_retry_timeout(3, 2000, randomization_factor=0.0)
        8000
        >>> 1000 <= get_retry_timeout(1, 2000) <= 3000
        True

        ```
    """
    min_randomization = 1 - randomization_factor
    max_randomization = 1 + randomization_factor
    randomization = random.uniform(min_randomization, max_randomization)  # noqa: S311
    exponential = 2 ** (num_retries - 1)
    return math.ceil(exponential * base_interval_ms * randomization)


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy with jitter.

    This is the default strategy used when the retry policy has no
    caller-supplied retry strategy and the server sent no ``Retry-After``.

    Args:
        base_interval_ms: The base interval in milliseconds.
        randomization_factor: Half-width of the jitter range. Must be in
            ``[0, 1]``.

    Example:
        ```pycon
        >>> from apirequest.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(base_interval_ms=100, randomization_factor=0.0)
        >>> backoff.calculate(1)
        100
        >>> backoff.calculate(2)
        200

        ```
    """

    def __init__(
        self,
        base_interval_ms: float,
        randomization_factor: float = RETRY_RANDOMIZATION_FACTOR,
    ) -> None:
        if base_interval_ms < 0:
            msg = f"base_interval_ms must be non-negative, got {base_interval_ms}"
            raise ValueError(msg)
        if not 0 <= randomization_factor <= 1:
            msg = f"randomization_factor must be in [0, 1], got {randomization_factor}"
            raise ValueError(msg)

        self.base_interval_ms = base_interval_ms
        self.randomization_factor = randomization_factor

    def calculate(self, num_retries: int) -> int:
        return get_retry_timeout(num_retries, self.base_interval_ms, self.randomization_factor)
