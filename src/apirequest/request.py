r"""Execution of a single API request, with retries.

This module is used by higher-level request helpers such as
``request_async`` and ``AsyncAPIClient``; resource code should go
through those rather than drive an ``APIRequest`` directly.
"""

from __future__ import annotations

__all__ = ["APIRequest"]

import asyncio
import logging
from typing import TYPE_CHECKING

import httpx

from apirequest.core.config import RequestConfig
from apirequest.events import RESPONSE_EVENT, EventBus
from apirequest.exceptions import APIRequestError, ErrorKind
from apirequest.finalizer import ResultFinalizer
from apirequest.response import snapshot_request, snapshot_response
from apirequest.retry.controller import RetryController
from apirequest.retry.decider import RetryDecider, classify_status
from apirequest.retry.state import AttemptState
from apirequest.scheduler import LoopScheduler
from apirequest.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Callable

    from apirequest.response import ResponseObject
    from apirequest.scheduler import Scheduler, TimerHandle

    Callback = Callable[[Exception | None, ResponseObject | None], object]

logger: logging.Logger = logging.getLogger(__name__)


class APIRequest:
    r"""Prepares and executes one logical API request.

    If a callback is given to ``execute`` the outcome is classified,
    temporary failures are retried according to the retry policy, and the
    callback receives exactly one terminal ``(error, response)`` pair.
    Without a callback the response is streamed: it is available unread
    through ``get_response_stream`` and is never retried.

    Every attempt publishes a ``response`` event with ``(error, response)``
    on the event bus.

    Args:
        config: Request-specific configuration.
        event_bus: Event bus of the SDK instance.
        client: The httpx client used to send the request. Redirects are
            never followed; every status code is returned as a response.
        scheduler: Scheduler used for retries and deferred delivery.
            Defaults to ``LoopScheduler()``.

    Raises:
        TypeError: If ``config`` or ``event_bus`` have the wrong type.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from apirequest import APIRequest, EventBus, RequestConfig, RequestDescriptor
        >>> async def main():
        ...     async with httpx.AsyncClient() as client:
        ...         done = asyncio.get_running_loop().create_future()
        ...         request = APIRequest(
        ...             RequestConfig(request=RequestDescriptor(url="https://api.example.com/files/123")),
        ...             EventBus(),
        ...             client,
        ...         )
        ...         await request.execute(lambda error, response: done.set_result(response))
        ...         return (await done).status
        ...
        >>> asyncio.run(main())  # doctest: +SKIP
        200

        ```
    """

    def __init__(
        self,
        config: RequestConfig,
        event_bus: EventBus,
        client: httpx.AsyncClient,
        *,
        scheduler: Scheduler | None = None,
    ) -> None:
        if not isinstance(config, RequestConfig):
            msg = f"config must be a RequestConfig, got {type(config).__name__}"
            raise TypeError(msg)
        if not isinstance(event_bus, EventBus):
            msg = f"event_bus must be an EventBus, got {type(event_bus).__name__}"
            raise TypeError(msg)
        self.config = config
        self.event_bus = event_bus
        self.client = client
        self.scheduler: Scheduler = scheduler if scheduler is not None else LoopScheduler()

        self.attempts = AttemptState()
        self.decider = RetryDecider(config.request)
        self.controller = RetryController(config.policy, self.attempts)
        self.finalizer = ResultFinalizer(self.scheduler)
        self.is_retryable = self.decider.is_request_retryable

        self.request: httpx.Request | None = None
        self.response: httpx.Response | None = None
        self.stream_error: httpx.RequestError | None = None

        self._callback: Callback | None = None
        self._timer: TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()
        self._num_attempts = 0

    @property
    def finished(self) -> bool:
        r"""Whether the terminal outcome has been handed to the finalizer."""
        return self.finalizer.delivered

    async def execute(self, callback: Callback | None = None) -> None:
        """Execute one attempt of the request.

        The callback is remembered, so retries call ``execute()`` without
        arguments and stay in callback mode. In callback mode any
        exception raised while attempting is delivered to the callback
        as the terminal error.

        Args:
            callback: Callback receiving ``(error, response)`` once the
                request is finalized. Without one, the request runs in
                stream mode.
        """
        self._callback = callback or self._callback
        self._num_attempts += 1

        if self._callback is None:
            await self._send_stream()
            return

        try:
            await self._send_attempt()
        except Exception as exc:
            logger.exception(
                f"Attempt {self._num_attempts} of {self.config.request.method} "
                f"{self.config.request.url} raised"
            )
            self._fail(exc)

    async def _send_attempt(self) -> None:
        self.attempts.mark_started()
        self.controller.on_attempt()
        self.request = self.client.build_request(**self.config.request.to_httpx_kwargs())
        try:
            self.response = await self.client.send(self.request, follow_redirects=False)
        except httpx.RequestError as exc:
            self._handle_response(exc, None)
        else:
            self._handle_response(None, self.response)

    async def _send_stream(self) -> None:
        self.request = self.client.build_request(**self.config.request.to_httpx_kwargs())
        try:
            self.response = await self.client.send(
                self.request, stream=True, follow_redirects=False
            )
        except httpx.RequestError as exc:
            self.stream_error = exc
            self.event_bus.emit(RESPONSE_EVENT, exc, None)
        else:
            self.event_bus.emit(RESPONSE_EVENT, None, self.response)

    def get_response_stream(self) -> httpx.Response | None:
        """Return the unread response of a stream-mode request.

        Returns:
            The response, or None until a stream-mode request got one.
            The caller reads and closes it.
        """
        return self.response

    def cancel(self) -> bool:
        """Stop retrying.

        A scheduled retry is cancelled and the operation is finalized
        with the error of the last attempt. An attempt already in flight
        runs to completion.

        Returns:
            True if a scheduled retry was cancelled.
        """
        if self._timer is None or self.finished:
            return False
        self._timer.cancel()
        self._timer = None
        logger.debug(f"Cancelled scheduled retry of {self.config.request.method} {self.config.request.url}")
        self.controller.on_final_failure(self.attempts.last_error)
        self._finish(self.attempts.last_error)
        return True

    def _handle_response(
        self, exc: httpx.RequestError | None, response: httpx.Response | None
    ) -> None:
        # Snapshots are redacted copies; self.request keeps the live headers
        request_obj = snapshot_request(self.request)
        error: APIRequestError | None = None
        snapshot: ResponseObject | None = None

        if response is not None:
            snapshot = snapshot_response(response, request_obj)
            kind = classify_status(response.status_code)
            if kind is not None:
                error = APIRequestError(
                    f"{response.status_code} - {httpx.codes.get_reason_phrase(response.status_code)}",
                    kind=kind,
                    request=request_obj,
                    response=snapshot,
                )
        else:
            error = APIRequestError(
                f"{request_obj.method} request to {request_obj.url} failed: {exc!r}",
                kind=ErrorKind.TRANSPORT,
                request=request_obj,
                cause=exc,
            )

        log_structured(
            logger,
            logging.DEBUG,
            f"{request_obj.method} {request_obj.url} attempt {self._num_attempts}: "
            f"{error.message if error is not None else snapshot.status}",
            method=request_obj.method,
            url=request_obj.url,
            status=snapshot.status if snapshot is not None else None,
            attempt=self._num_attempts,
            error_kind=error.kind.value if error is not None else None,
        )

        if error is not None:
            self.event_bus.emit(RESPONSE_EVENT, error, None)
            if self.decider.should_retry(error):
                self._retry(error)
            else:
                self.controller.on_final_failure(error)
                self._finish(error)
            return

        self.event_bus.emit(RESPONSE_EVENT, None, snapshot)
        self.controller.on_success()
        self._finish(None, snapshot)

    def _retry(self, error: APIRequestError) -> None:
        decision = self.controller.on_failure(error)
        if not decision.should_retry:
            self._finish(decision.error)
            return
        self._timer = self.scheduler.call_later(decision.delay_ms, self._run_scheduled_attempt)

    def _run_scheduled_attempt(self) -> None:
        self._timer = None
        task = asyncio.ensure_future(self.execute())
        self._tasks.add(task)
        task.add_done_callback(self._on_attempt_done)

    def _on_attempt_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)

    def _fail(self, exc: Exception) -> None:
        if self.finished:
            return
        self.controller.on_final_failure(exc)
        self._finish(exc)

    def _finish(self, error: Exception | None, response: ResponseObject | None = None) -> None:
        self.finalizer.finish(self._callback, error, response)
