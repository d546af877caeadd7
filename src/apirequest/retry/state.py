r"""Mutable attempt state of one logical operation."""

from __future__ import annotations

__all__ = ["AttemptState"]

import time
from dataclasses import dataclass


@dataclass
class AttemptState:
    """Attempt bookkeeping owned by a single ``APIRequest``.

    Attributes:
        num_retries: The number of retries performed so far.
        start_time: Monotonic instant of the first attempt, or None if no
            attempt has started yet.
        last_error: The error of the most recent failed attempt.

    Example:
        ```pycon
        >>> from apirequest.retry.state import AttemptState
        >>> state = AttemptState()
        >>> state.elapsed_ms()
        0.0
        >>> state.mark_started()
        >>> state.elapsed_ms() >= 0
        True

        ```
    """

    num_retries: int = 0
    start_time: float | None = None
    last_error: Exception | None = None

    def mark_started(self) -> None:
        r"""Record the start instant if it has not been recorded yet."""
        if self.start_time is None:
            self.start_time = time.monotonic()

    def elapsed_ms(self) -> float:
        r"""Return the milliseconds elapsed since the first attempt."""
        if self.start_time is None:
            return 0.0
        return (time.monotonic() - self.start_time) * 1000
