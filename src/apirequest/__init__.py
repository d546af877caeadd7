r"""apirequest - Request-execution core of an API client SDK.

This package executes already-built API request descriptors over httpx:
it issues each attempt, classifies the outcome, retries temporary
failures with jittered exponential backoff (or a caller-supplied retry
strategy, or the server's Retry-After), redacts sensitive headers, and
delivers exactly one terminal outcome per logical operation.

Key Features:
    - Retries for 5xx (except 507), 408, 429 and transport failures
    - Multipart uploads and JWT grant exchanges are never retried
    - Pluggable retry strategy receiving attempt and elapsed-time data
    - Authorization headers redacted from every delivered object
    - Observer event bus with one ``response`` event per attempt
    - Callback, awaitable and async context manager APIs

Example:
    ```pycon
    >>> import asyncio
    >>> from apirequest import AsyncAPIClient, RequestDescriptor, RetryPolicy
    >>> async def main():  # doctest: +SKIP
    ...     async with AsyncAPIClient(policy=RetryPolicy(num_max_retries=3)) as client:
    ...         response = await client.request(
    ...             RequestDescriptor(
    ...                 url="https://api.example.com/files/123",
    ...                 headers={"Authorization": "Bearer token"},
    ...             )
    ...         )
    ...     return response.data
    ...
    >>> asyncio.run(main())  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "APIRequest",
    "APIRequestError",
    "AsyncAPIClient",
    "ErrorKind",
    "EventBus",
    "Outcome",
    "RESPONSE_EVENT",
    "RequestConfig",
    "RequestDescriptor",
    "RequestObject",
    "ResponseObject",
    "RetryOptions",
    "RetryPolicy",
    "__version__",
    "is_temporary_error",
    "request_async",
]

from importlib.metadata import PackageNotFoundError, version

from apirequest.client_async import AsyncAPIClient
from apirequest.core.config import RequestConfig, RetryPolicy
from apirequest.descriptor import RequestDescriptor
from apirequest.events import RESPONSE_EVENT, EventBus
from apirequest.exceptions import APIRequestError, ErrorKind
from apirequest.request import APIRequest
from apirequest.request_async import request_async
from apirequest.response import Outcome, RequestObject, ResponseObject
from apirequest.retry.decider import is_temporary_error
from apirequest.retry.strategy import RetryOptions

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
