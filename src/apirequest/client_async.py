r"""Asynchronous context manager client for API requests.

This module provides an async context manager that owns an
httpx.AsyncClient and an EventBus shared by every request it executes,
with a default retry policy that individual requests may override.
"""

from __future__ import annotations

__all__ = ["AsyncAPIClient"]

from typing import TYPE_CHECKING

import httpx

from apirequest.core.config import DEFAULT_TIMEOUT, RequestConfig, RetryPolicy
from apirequest.core.validation import validate_timeout
from apirequest.events import EventBus
from apirequest.exceptions import APIRequestError, ErrorKind
from apirequest.request import APIRequest
from apirequest.request_async import request_async
from apirequest.response import snapshot_request

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from apirequest.descriptor import RequestDescriptor
    from apirequest.response import ResponseObject
    from apirequest.scheduler import Scheduler


class AsyncAPIClient:
    r"""Asynchronous context manager for API requests.

    Args:
        policy: Default retry policy. If ``None``, ``RetryPolicy()`` is used.
        timeout: Maximum seconds to wait for server responses. Must be > 0.
        event_bus: Optional event bus. If ``None``, a new one is created
            and exposed as ``event_bus`` for observers to subscribe to.
        scheduler: Optional scheduler for retries and delivery.

    Example:
        ```pycon
        >>> import asyncio
        >>> from apirequest import AsyncAPIClient, RequestDescriptor, RetryPolicy
        >>> async def main():  # doctest: +SKIP
        ...     async with AsyncAPIClient(policy=RetryPolicy(num_max_retries=3)) as client:
        ...         client.event_bus.on("response", lambda error, response: print(error, response))
        ...         return await client.request(RequestDescriptor(url="https://api.example.com/files/123"))
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        *,
        policy: RetryPolicy | None = None,
        timeout: float | httpx.Timeout = DEFAULT_TIMEOUT,
        event_bus: EventBus | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        validate_timeout(timeout)
        self._timeout = timeout
        self.policy = policy if policy is not None else RetryPolicy()
        self.event_bus = event_bus if event_bus is not None else EventBus()
        self._scheduler = scheduler

        # Client will be created when entering context
        self._client: httpx.AsyncClient | None = None
        self._entered = False

    async def __aenter__(self) -> Self:
        self._client = httpx.AsyncClient(timeout=self._timeout)
        self._entered = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self._entered = False

    def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure the client is available for use.

        Raises:
            RuntimeError: If the client is used outside of a context manager.
        """
        if not self._entered or self._client is None:
            msg = "AsyncAPIClient must be used within an async context manager (async with statement)"
            raise RuntimeError(msg)
        return self._client

    async def request(
        self, descriptor: RequestDescriptor, policy: RetryPolicy | None = None
    ) -> ResponseObject:
        """Execute a request with automatic retries.

        Args:
            descriptor: The request to execute.
            policy: Retry policy overriding the client's default.

        Returns:
            The snapshot of the successful response.

        Raises:
            APIRequestError: If the request ultimately failed.
        """
        config = RequestConfig(
            request=descriptor,
            policy=policy if policy is not None else self.policy,
            timeout=self._timeout,
        )
        return await request_async(
            config,
            client=self._ensure_client(),
            event_bus=self.event_bus,
            scheduler=self._scheduler,
        )

    async def stream(self, descriptor: RequestDescriptor) -> httpx.Response:
        """Send a request and return its unread response.

        The request is sent once, without retries, and redirects are
        returned as-is. The caller reads the body and closes the response.

        Args:
            descriptor: The request to execute.

        Returns:
            The streaming httpx response.

        Raises:
            APIRequestError: If no response could be obtained.
        """
        api_request = APIRequest(
            RequestConfig(request=descriptor, policy=self.policy, timeout=self._timeout),
            self.event_bus,
            self._ensure_client(),
            scheduler=self._scheduler,
        )
        await api_request.execute()
        response = api_request.get_response_stream()
        if response is None:
            exc = api_request.stream_error
            raise APIRequestError(
                f"{descriptor.method} request to {descriptor.url} failed: {exc!r}",
                kind=ErrorKind.TRANSPORT,
                request=snapshot_request(api_request.request),
                cause=exc,
            )
        return response
