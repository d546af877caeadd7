r"""Retry-After header parsing utilities.

The server may ask the client to wait before retrying by sending a
``Retry-After`` header, either as a number of seconds or as an HTTP-date
(RFC 7231).
"""

from __future__ import annotations

__all__ = ["get_retry_after_ms", "parse_retry_after"]

import logging
import math
from contextlib import suppress
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

logger: logging.Logger = logging.getLogger(__name__)


def parse_retry_after(retry_after_header: str | None) -> float | None:
    """Parse a Retry-After header value into seconds.

    Args:
        retry_after_header: The header value, or None if absent.

    Returns:
        The number of seconds to wait, or None if the header is absent or
        cannot be parsed. Dates in the past give ``0.0``; negative
        and non-finite numbers are rejected.

    Example:
        ```pycon
        >>> from apirequest.utils.retry_after import parse_retry_after
        >>> parse_retry_after("120")
        120.0
        >>> parse_retry_after("1.5")
        1.5
        >>> parse_retry_after(None) is None
        True
        >>> parse_retry_after("invalid") is None
        True

        ```
    """
    if retry_after_header is None:
        return None

    with suppress(ValueError):
        seconds = float(retry_after_header)
        if not math.isfinite(seconds):
            logger.debug(f"Ignoring non-finite Retry-After header: {retry_after_header!r}")
            return None
        if seconds >= 0:
            return seconds
        logger.debug(f"Ignoring negative Retry-After header: {retry_after_header!r}")
        return None

    try:
        retry_date: datetime = parsedate_to_datetime(retry_after_header)
        now = datetime.now(timezone.utc)
        return max(0.0, (retry_date - now).total_seconds())
    except (ValueError, TypeError, OverflowError):
        logger.debug(f"Failed to parse Retry-After header: {retry_after_header!r}")
        return None


def get_retry_after_ms(headers: Mapping[str, str] | None) -> float | None:
    """Return the Retry-After delay in milliseconds from response headers.

    Args:
        headers: The response headers. The lookup is case-insensitive.

    Returns:
        The delay in milliseconds, or None if the header is absent or
        cannot be parsed.

    Example:
        ```pycon
        >>> from apirequest.utils.retry_after import get_retry_after_ms
        >>> get_retry_after_ms({"Retry-After": "3"})
        3000.0
        >>> get_retry_after_ms({}) is None
        True

        ```
    """
    if not headers:
        return None
    for name, value in headers.items():
        if name.lower() == "retry-after":
            seconds = parse_retry_after(value)
            if seconds is None or not math.isfinite(seconds * 1000):
                return None
            return seconds * 1000
    return None
