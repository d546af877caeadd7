r"""Outcome classification and retry eligibility.

This module classifies HTTP status codes into success, temporary error
and permanent error, and decides whether a request may be attempted again
based on its descriptor and on how its failure was classified.
"""

from __future__ import annotations

__all__ = ["RETRYABLE_STATUS_CODES", "RetryDecider", "classify_status", "is_temporary_error"]

import logging
from typing import TYPE_CHECKING

import httpx

from apirequest.exceptions import APIRequestError, ErrorKind

if TYPE_CHECKING:
    from apirequest.descriptor import RequestDescriptor

logger: logging.Logger = logging.getLogger(__name__)

# Range of server error status codes
SERVER_ERROR_RANGE = (500, 599)

# Client error status codes that indicate a transient condition
# 408: Request Timeout
# 429: Too Many Requests - Rate limiting
RETRYABLE_STATUS_CODES = frozenset({httpx.codes.REQUEST_TIMEOUT, httpx.codes.TOO_MANY_REQUESTS})


def is_temporary_error(status: int) -> bool:
    """Return True if the status code indicates a transient error.

    Every 5xx status is temporary except 507, which the API returns when
    the account has run out of storage and is therefore permanent. 408 and
    429 are temporary as well.

    Args:
        status: The response HTTP status code.

    Returns:
        True if the response may succeed when retried.

    Example:
        ```pycon
        >>> from apirequest.retry.decider import is_temporary_error
        >>> is_temporary_error(503)
        True
        >>> is_temporary_error(507)
        False
        >>> is_temporary_error(429)
        True
        >>> is_temporary_error(404)
        False

        ```
    """
    if (
        status != httpx.codes.INSUFFICIENT_STORAGE
        and SERVER_ERROR_RANGE[0] <= status <= SERVER_ERROR_RANGE[1]
    ):
        return True
    return status in RETRYABLE_STATUS_CODES


def classify_status(status: int) -> ErrorKind | None:
    """Classify a response status code.

    Args:
        status: The response HTTP status code.

    Returns:
        ``ErrorKind.TEMPORARY`` or ``ErrorKind.PERMANENT`` for error
        statuses, or None for statuses below 400 (redirects included).

    Example:
        ```pycon
        >>> from apirequest.retry.decider import classify_status
        >>> classify_status(200) is None
        True
        >>> classify_status(502).value
        'temporary'
        >>> classify_status(404).value
        'permanent'

        ```
    """
    if is_temporary_error(status):
        return ErrorKind.TEMPORARY
    if status >= httpx.codes.BAD_REQUEST:
        return ErrorKind.PERMANENT
    return None


class RetryDecider:
    """Decides whether a failed request may be attempted again.

    Args:
        descriptor: The descriptor of the request being executed.
    """

    def __init__(self, descriptor: RequestDescriptor) -> None:
        self.descriptor = descriptor

    @property
    def is_request_retryable(self) -> bool:
        r"""Whether the request itself can be resent.

        Multipart/file bodies cannot be rebuilt without re-reading their
        source, and JWT bearer-grant exchanges are retried by the
        authentication layer.
        """
        return self.descriptor.is_retryable and not self.descriptor.is_jwt_grant

    def should_retry(self, error: APIRequestError) -> bool:
        """Determine if a failed attempt should go through the retry
        controller.

        Args:
            error: The error produced by the attempt.

        Returns:
            True if the request and the failure are both retryable.
        """
        if not error.is_retryable_kind:
            logger.debug(
                f"{self.descriptor.method} request to {self.descriptor.url} failed with "
                f"non-retryable status {error.status}"
            )
            return False
        if not self.is_request_retryable:
            logger.debug(
                f"{self.descriptor.method} request to {self.descriptor.url} cannot be retried "
                f"(multipart body or JWT grant)"
            )
            return False
        return True
