r"""Timer abstraction used to defer deliveries and schedule retries.

All waiting in the request core goes through a Scheduler so that no
operation ever blocks and tests can substitute a scheduler that
controls time.
"""

from __future__ import annotations

__all__ = ["LoopScheduler", "Scheduler", "TimerHandle"]

import asyncio
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable


class TimerHandle(Protocol):
    r"""Handle of a scheduled callback."""

    def cancel(self) -> None: ...

    def cancelled(self) -> bool: ...


class Scheduler(ABC):
    """Abstract base class for schedulers."""

    @abstractmethod
    def call_soon(self, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        """Run a callback on the next scheduling tick, never synchronously.

        Args:
            callback: The callback to run.
            *args: Positional arguments passed to the callback.

        Returns:
            A handle that can cancel the callback.
        """

    @abstractmethod
    def call_later(self, delay_ms: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        """Run a callback after a delay.

        Args:
            delay_ms: The delay in milliseconds. Negative values are
                treated as zero.
            callback: The callback to run.
            *args: Positional arguments passed to the callback.

        Returns:
            A handle that can cancel the callback.
        """


class LoopScheduler(Scheduler):
    """Scheduler backed by an asyncio event loop.

    Args:
        loop: The event loop to schedule on. Defaults to the running loop
            at the time of each call.

    Example:
        ```pycon
        >>> import asyncio
        >>> from apirequest.scheduler import LoopScheduler
        >>> async def main():
        ...     done = asyncio.get_running_loop().create_future()
        ...     LoopScheduler().call_later(1, done.set_result, "fired")
        ...     return await done
        ...
        >>> asyncio.run(main())
        'fired'

        ```
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop if self._loop is not None else asyncio.get_running_loop()

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> asyncio.Handle:
        return self.loop.call_soon(callback, *args)

    def call_later(
        self, delay_ms: float, callback: Callable[..., Any], *args: Any
    ) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay_ms) / 1000, callback, *args)
