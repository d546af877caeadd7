r"""Shared test helpers for the request core tests.

This module contains the hermetic HTTP transport, the schedulers that
control time in tests, and the callback recorder used across test files.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from apirequest.scheduler import Scheduler

if TYPE_CHECKING:
    from collections.abc import Callable

    from apirequest.response import ResponseObject

TEST_URL = "https://api.example.com/2.0/files/123"


class ResponseSequence:
    """Handler for ``httpx.MockTransport`` replaying a scripted sequence.

    Each item is an ``httpx.Response`` template, an exception to raise, or
    an int status code. The last item repeats once the sequence is
    exhausted. Every received request is recorded.
    """

    def __init__(self, *items: httpx.Response | BaseException | int) -> None:
        self.items = list(items)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self.items[min(len(self.requests), len(self.items)) - 1]
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, int):
            return httpx.Response(item)
        return httpx.Response(item.status_code, headers=item.headers, content=item.content)

    @property
    def call_count(self) -> int:
        return len(self.requests)


def create_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    r"""Create an httpx.AsyncClient served by a mock transport."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class RecordingScheduler(Scheduler):
    """Scheduler that records requested delays and runs timers on the
    next loop iteration instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []
        self.num_soon_calls = 0

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> asyncio.Handle:
        self.num_soon_calls += 1
        return asyncio.get_running_loop().call_soon(callback, *args)

    def call_later(self, delay_ms: float, callback: Callable[..., Any], *args: Any) -> asyncio.Handle:
        self.delays.append(delay_ms)
        return asyncio.get_running_loop().call_soon(callback, *args)


@dataclass
class ManualTimer:
    delay_ms: float
    callback: Callable[..., Any]
    args: tuple[Any, ...]
    _cancelled: bool = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


@dataclass
class ManualScheduler(Scheduler):
    """Scheduler whose timers only fire when ``advance`` is called.

    ``call_soon`` callbacks still run on the next loop iteration.
    """

    timers: list[ManualTimer] = field(default_factory=list)

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> asyncio.Handle:
        return asyncio.get_running_loop().call_soon(callback, *args)

    def call_later(self, delay_ms: float, callback: Callable[..., Any], *args: Any) -> ManualTimer:
        timer = ManualTimer(delay_ms, callback, args)
        self.timers.append(timer)
        return timer

    def advance(self) -> int:
        r"""Fire every pending, non-cancelled timer and return how many fired."""
        pending = [timer for timer in self.timers if not timer.cancelled()]
        self.timers = []
        for timer in pending:
            timer.callback(*timer.args)
        return len(pending)


class CallbackRecorder:
    """Completion callback recording every ``(error, response)`` call."""

    def __init__(self) -> None:
        self.calls: list[tuple[Exception | None, ResponseObject | None]] = []
        self._done = asyncio.get_running_loop().create_future()

    def __call__(self, error: Exception | None, response: ResponseObject | None) -> None:
        self.calls.append((error, response))
        if not self._done.done():
            self._done.set_result(None)

    async def wait(self, timeout: float = 2.0) -> tuple[Exception | None, ResponseObject | None]:
        r"""Wait for the first call, then let pending callbacks run."""
        await asyncio.wait_for(asyncio.shield(self._done), timeout)
        for _ in range(5):
            await asyncio.sleep(0)
        return self.calls[0]
