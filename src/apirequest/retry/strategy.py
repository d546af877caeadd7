r"""Retry delay calculation.

This module provides the RetryStrategy class that computes the wait
before the next attempt, in priority order: a caller-supplied retry
strategy, the server's ``Retry-After`` header, then the default
exponential backoff.
"""

from __future__ import annotations

__all__ = ["RetryDecision", "RetryOptions", "RetryStrategy"]

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from apirequest.backoff.exponential import ExponentialBackoff
from apirequest.exceptions import APIRequestError
from apirequest.utils.retry_after import get_retry_after_ms

if TYPE_CHECKING:
    from collections.abc import Callable

    from apirequest.backoff.base import BaseBackoffStrategy
    from apirequest.core.config import RetryPolicy
    from apirequest.retry.state import AttemptState

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryOptions:
    """Information passed to a caller-supplied retry strategy.

    Attributes:
        error: The error of the failed attempt.
        num_retry_attempts: The retry about to be scheduled (1-indexed).
        num_max_retries: Maximum number of retries configured.
        retry_interval_ms: The configured base retry interval.
        total_elapsed_time_ms: Milliseconds since the first attempt.
    """

    error: Exception
    num_retry_attempts: int
    num_max_retries: int
    retry_interval_ms: float
    total_elapsed_time_ms: float


@dataclass(frozen=True)
class RetryDecision:
    """Result of a delay calculation.

    Exactly one of ``delay_ms`` and ``error`` is meaningful: a delay means
    the next attempt is scheduled, otherwise ``error`` is final.

    Attributes:
        delay_ms: The wait before the next attempt, or None to stop.
        error: The error to deliver when retrying stops.
    """

    delay_ms: float | None
    error: Exception | None = None

    @property
    def should_retry(self) -> bool:
        return self.delay_ms is not None


def _is_delay(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


class RetryStrategy:
    """Strategy for calculating the delay before the next attempt.

    Args:
        policy: The retry policy.
        backoff_strategy: Default backoff used when neither a caller
            strategy nor a ``Retry-After`` header applies. Defaults to
            ``ExponentialBackoff(policy.retry_interval_ms)``.

    Example:
        ```pycon
        >>> from apirequest.core.config import RetryPolicy
        >>> from apirequest.retry.state import AttemptState
        >>> from apirequest.retry.strategy import RetryStrategy
        >>> strategy = RetryStrategy(RetryPolicy(retry_strategy=lambda options: 250))
        >>> state = AttemptState(num_retries=1)
        >>> strategy.calculate_delay(Exception("boom"), state).delay_ms
        250

        ```
    """

    def __init__(
        self,
        policy: RetryPolicy,
        backoff_strategy: BaseBackoffStrategy | None = None,
    ) -> None:
        self.policy = policy
        self.backoff_strategy: BaseBackoffStrategy = (
            backoff_strategy
            if backoff_strategy is not None
            else ExponentialBackoff(policy.retry_interval_ms)
        )

    @property
    def custom_strategy(self) -> Callable[[RetryOptions], Any] | None:
        return self.policy.retry_strategy

    def calculate_delay(self, error: Exception, state: AttemptState) -> RetryDecision:
        """Calculate the delay before the next attempt.

        ``state.num_retries`` must already count the retry being scheduled.

        Args:
            error: The error of the failed attempt.
            state: The attempt state of the logical operation.

        Returns:
            The decision. A caller strategy returning anything but a
            finite number stops retrying; if that value is an exception it
            becomes the delivered error.
        """
        if self.custom_strategy is not None:
            options = RetryOptions(
                error=error,
                num_retry_attempts=state.num_retries,
                num_max_retries=self.policy.num_max_retries,
                retry_interval_ms=self.policy.retry_interval_ms,
                total_elapsed_time_ms=state.elapsed_ms(),
            )
            result = self.custom_strategy(options)
            if not _is_delay(result):
                logger.debug(f"Retry strategy declined to retry (returned {type(result).__name__})")
                if isinstance(result, Exception):
                    return RetryDecision(delay_ms=None, error=result)
                return RetryDecision(delay_ms=None, error=error)
            return RetryDecision(delay_ms=result)

        if isinstance(error, APIRequestError) and error.response is not None:
            retry_after_ms = get_retry_after_ms(error.response.headers)
            if retry_after_ms is not None:
                logger.debug(f"Using Retry-After header value: {retry_after_ms:.0f}ms")
                return RetryDecision(delay_ms=retry_after_ms)

        delay_ms = self.backoff_strategy.calculate(state.num_retries)
        logger.debug(f"Waiting {delay_ms}ms before retry {state.num_retries}")
        return RetryDecision(delay_ms=delay_ms)
