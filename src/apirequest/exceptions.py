r"""Define the exceptions delivered for failed API requests."""

from __future__ import annotations

__all__ = ["APIRequestError", "ErrorKind"]

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from apirequest.response import RequestObject, ResponseObject


class ErrorKind(str, Enum):
    r"""Classification of a failed attempt."""

    TRANSPORT = "transport"
    TEMPORARY = "temporary"
    PERMANENT = "permanent"


class APIRequestError(Exception):
    r"""Error delivered when an API request did not get back the data it
    was supposed to.

    Args:
        message: The error message.
        kind: How the failure was classified.
        request: Redacted information about the request that failed.
        response: Information about the response, if one was received.
        cause: The underlying transport exception, if any.

    Attributes:
        status: The response HTTP status code, if a response was received.
        max_retries_exceeded: ``True`` iff the request was retried the
            maximum number of times and still failed.

    Example:
        ```pycon
        >>> from apirequest.exceptions import APIRequestError, ErrorKind
        >>> from apirequest.response import RequestObject
        >>> error = APIRequestError(
        ...     "GET request to https://api.example.com failed",
        ...     kind=ErrorKind.TRANSPORT,
        ...     request=RequestObject(url="https://api.example.com", method="GET"),
        ... )
        >>> error.status is None
        True
        >>> error.is_retryable_kind
        True

        ```
    """

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind,
        request: RequestObject,
        response: ResponseObject | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.request = request
        self.response = response
        self.status: int | None = response.status if response is not None else None
        self.max_retries_exceeded = False
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @property
    def is_retryable_kind(self) -> bool:
        r"""``True`` unless the failure was classified as permanent."""
        return self.kind is not ErrorKind.PERMANENT

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(message={self.message!r}, kind={self.kind.value}, "
            f"status={self.status}, max_retries_exceeded={self.max_retries_exceeded})"
        )
