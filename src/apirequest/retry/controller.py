r"""Retry state machine of one logical operation.

The RetryController tracks where an operation stands
(``ATTEMPTING -> DONE | SCHEDULED -> ATTEMPTING | FAILED``) and turns a
retryable failure into either a scheduled delay or a final error. It
never schedules anything itself; the executor acts on its decisions.
"""

from __future__ import annotations

__all__ = ["RetryController", "RetryState"]

import logging
from enum import Enum
from typing import TYPE_CHECKING

from apirequest.exceptions import APIRequestError
from apirequest.retry.strategy import RetryDecision, RetryStrategy

if TYPE_CHECKING:
    from apirequest.core.config import RetryPolicy
    from apirequest.retry.state import AttemptState

logger: logging.Logger = logging.getLogger(__name__)


class RetryState(str, Enum):
    r"""Lifecycle states of a logical operation."""

    ATTEMPTING = "attempting"
    SCHEDULED = "scheduled"
    DONE = "done"
    FAILED = "failed"


class RetryController:
    """Decides between scheduling another attempt and failing.

    Args:
        policy: The retry policy.
        state: The attempt state, shared with the executor.
        strategy: Strategy for calculating delays. Defaults to
            ``RetryStrategy(policy)``.

    Example:
        ```pycon
        >>> from apirequest.core.config import RetryPolicy
        >>> from apirequest.retry import AttemptState, RetryController
        >>> controller = RetryController(
        ...     RetryPolicy(num_max_retries=1, retry_strategy=lambda options: 10), AttemptState()
        ... )
        >>> controller.on_failure(Exception("boom")).delay_ms
        10
        >>> controller.state.value
        'scheduled'
        >>> controller.on_failure(Exception("boom")).should_retry
        False

        ```
    """

    def __init__(
        self,
        policy: RetryPolicy,
        state: AttemptState,
        strategy: RetryStrategy | None = None,
    ) -> None:
        self.policy = policy
        self.attempts = state
        self.strategy = strategy if strategy is not None else RetryStrategy(policy)
        self.state = RetryState.ATTEMPTING

    def on_attempt(self) -> None:
        r"""Record that a new attempt started."""
        self.state = RetryState.ATTEMPTING

    def on_success(self) -> None:
        r"""Record that the operation completed successfully."""
        self.state = RetryState.DONE

    def on_final_failure(self, error: Exception) -> None:
        r"""Record that the operation failed without going through retry."""
        self.attempts.last_error = error
        self.state = RetryState.FAILED

    def on_failure(self, error: Exception) -> RetryDecision:
        """Handle a retryable failure.

        If retries remain, the retry count is incremented and the delay is
        calculated. Otherwise the error is flagged as retries-exhausted.

        Args:
            error: The error of the failed attempt.

        Returns:
            The decision: a delay to wait before the next attempt, or the
            error to deliver.
        """
        self.attempts.last_error = error
        if self.attempts.num_retries < self.policy.num_max_retries:
            self.attempts.num_retries += 1
            decision = self.strategy.calculate_delay(error, self.attempts)
            if decision.should_retry:
                self.state = RetryState.SCHEDULED
                logger.debug(
                    f"Scheduling retry {self.attempts.num_retries}/{self.policy.num_max_retries} "
                    f"in {decision.delay_ms}ms"
                )
            else:
                self.attempts.last_error = decision.error
                self.state = RetryState.FAILED
            return decision

        logger.debug(f"Max retries ({self.policy.num_max_retries}) exceeded")
        if isinstance(error, APIRequestError):
            error.max_retries_exceeded = True
        self.state = RetryState.FAILED
        return RetryDecision(delay_ms=None, error=error)
