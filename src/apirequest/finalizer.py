r"""Exactly-once delivery of the terminal outcome."""

from __future__ import annotations

__all__ = ["ResultFinalizer"]

import logging
from typing import TYPE_CHECKING

from apirequest.response import Outcome

if TYPE_CHECKING:
    from collections.abc import Callable

    from apirequest.response import ResponseObject
    from apirequest.scheduler import Scheduler

logger: logging.Logger = logging.getLogger(__name__)


class ResultFinalizer:
    """Delivers the outcome of a logical operation to its callback.

    Delivery is always deferred to the next scheduling tick, even for
    failures detected synchronously, so callers observe consistent
    asynchronous behavior. Only the first call to ``finish`` delivers.

    Args:
        scheduler: The scheduler used to defer delivery.
    """

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self.outcome: Outcome | None = None

    @property
    def delivered(self) -> bool:
        return self.outcome is not None

    def finish(
        self,
        callback: Callable[[Exception | None, ResponseObject | None], object],
        error: Exception | None = None,
        response: ResponseObject | None = None,
    ) -> bool:
        """Schedule delivery of the outcome.

        Args:
            callback: The completion callback.
            error: The terminal error, if the operation failed.
            response: The response, if the operation succeeded.

        Returns:
            True if delivery was scheduled, False if the operation was
            already finalized.
        """
        if self.outcome is not None:
            logger.warning(f"Ignoring duplicate finalization (already finalized with {self.outcome})")
            return False
        self.outcome = Outcome(error=error, response=None if error is not None else response)
        self._scheduler.call_soon(self._deliver, callback, self.outcome)
        return True

    @staticmethod
    def _deliver(
        callback: Callable[[Exception | None, ResponseObject | None], object], outcome: Outcome
    ) -> None:
        if outcome.error is not None:
            callback(outcome.error, None)
            return
        callback(None, outcome.response)
