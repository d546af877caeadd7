r"""Awaitable execution of an API request with automatic retry logic."""

from __future__ import annotations

__all__ = ["request_async"]

import asyncio
import logging
from typing import TYPE_CHECKING

import httpx

from apirequest.events import EventBus
from apirequest.request import APIRequest
from apirequest.response import Outcome

if TYPE_CHECKING:
    from apirequest.core.config import RequestConfig
    from apirequest.response import ResponseObject
    from apirequest.scheduler import Scheduler

logger: logging.Logger = logging.getLogger(__name__)


async def request_async(
    config: RequestConfig,
    *,
    client: httpx.AsyncClient | None = None,
    event_bus: EventBus | None = None,
    scheduler: Scheduler | None = None,
) -> ResponseObject:
    """Execute a request and wait for its terminal outcome.

    This is the awaitable counterpart of ``APIRequest.execute(callback)``:
    the request is retried according to ``config.policy`` and the
    coroutine resolves once, with the final response or error.
    Cancelling the coroutine cancels any scheduled retry.

    Args:
        config: Request-specific configuration.
        client: An optional httpx.AsyncClient. If None, a new client is
            created with ``config.timeout`` and closed after use.
        event_bus: An optional event bus receiving a ``response`` event
            per attempt. If None, a private bus is used.
        scheduler: Optional scheduler for retries and delivery.

    Returns:
        The snapshot of the successful response.

    Raises:
        APIRequestError: If the request failed permanently, could not be
            retried, or exhausted its retries.
        Exception: The error supplied by a retry strategy that declined
            to retry.

    Example:
        ```pycon
        >>> import asyncio
        >>> from apirequest import RequestConfig, RequestDescriptor, request_async
        >>> config = RequestConfig(request=RequestDescriptor(url="https://api.example.com/files/123"))
        >>> response = asyncio.run(request_async(config))  # doctest: +SKIP
        >>> response.data["id"]  # doctest: +SKIP
        '123'

        ```
    """
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=config.timeout)
    future: asyncio.Future[Outcome] = asyncio.get_running_loop().create_future()

    def _on_done(error: Exception | None, response: ResponseObject | None) -> None:
        if not future.done():
            future.set_result(Outcome(error=error, response=response))

    api_request = APIRequest(
        config,
        event_bus if event_bus is not None else EventBus(),
        client,
        scheduler=scheduler,
    )
    try:
        await api_request.execute(_on_done)
        outcome = await future
    except asyncio.CancelledError:
        api_request.cancel()
        raise
    finally:
        if owns_client:
            await client.aclose()
    return outcome.unwrap()
