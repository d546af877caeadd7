r"""Snapshots of requests and responses delivered to callers.

The transport objects returned by ``httpx`` carry live connection state,
streams and back-references. Callers instead receive small immutable
snapshots holding only the request line, headers, status and decoded
body, with sensitive request headers already redacted.
"""

from __future__ import annotations

__all__ = ["Outcome", "RequestObject", "ResponseObject", "snapshot_request", "snapshot_response"]

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from apirequest.utils.redact import clean_sensitive_headers

if TYPE_CHECKING:
    import httpx

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestObject:
    """Information about the request that was sent.

    Attributes:
        url: The full URL, including the query string.
        method: The HTTP method.
        headers: The headers sent, with sensitive values redacted.
    """

    url: str
    method: str
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ResponseObject:
    """Information about a response and the request that produced it.

    Attributes:
        request: The request that generated this response.
        status: The HTTP status code.
        headers: The response headers.
        data: The response body: decoded JSON when possible, ``str`` for
            textual content types, ``bytes`` otherwise, or ``None`` when the
            body is empty.
    """

    request: RequestObject
    status: int
    headers: dict[str, str] = field(default_factory=dict)
    data: Any = None


@dataclass(frozen=True)
class Outcome:
    """Terminal result of a logical operation.

    Exactly one of ``error`` and ``response`` is set.

    Attributes:
        error: The terminal error, if the operation failed.
        response: The response, if the operation succeeded.
    """

    error: Exception | None = None
    response: ResponseObject | None = None

    def __post_init__(self) -> None:
        if (self.error is None) == (self.response is None):
            msg = "Outcome requires exactly one of error or response"
            raise ValueError(msg)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> ResponseObject:
        """Return the response or raise the error.

        Raises:
            Exception: The terminal error of a failed operation.
        """
        if self.error is not None:
            raise self.error
        return self.response


def snapshot_request(request: httpx.Request) -> RequestObject:
    """Create a redacted snapshot of a transport request.

    Args:
        request: The request built by httpx. It is not modified.

    Returns:
        The request snapshot.
    """
    return RequestObject(
        url=str(request.url),
        method=request.method,
        headers=clean_sensitive_headers(request.headers),
    )


def snapshot_response(response: httpx.Response, request: RequestObject) -> ResponseObject:
    """Create a snapshot of a fully read transport response.

    Args:
        response: The response returned by httpx. Its body must have been
            read already.
        request: The snapshot of the request that produced the response.

    Returns:
        The response snapshot.
    """
    return ResponseObject(
        request=request,
        status=response.status_code,
        headers=dict(response.headers.items()),
        data=_decode_body(response),
    )


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        content_type = response.headers.get("content-type", "")
        if content_type.startswith("text/"):
            return response.text
        logger.debug(f"Response body is not JSON ({content_type or 'no content type'})")
        return response.content
