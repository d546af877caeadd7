r"""Sensitive header redaction.

This module scrubs authorization-bearing headers from request snapshots
before they reach callers, so that credentials are not unintentionally
logged through error or response objects.
"""

from __future__ import annotations

__all__ = ["REMOVED_HEADER_MESSAGE", "SENSITIVE_HEADERS", "clean_sensitive_headers"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

# Replacement value for removed headers
REMOVED_HEADER_MESSAGE = "[REMOVED BY SDK]"

# Header names compared case-insensitively
SENSITIVE_HEADERS = frozenset({"authorization", "boxapi"})


def clean_sensitive_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    """Return a copy of the headers with sensitive values replaced.

    The given mapping is never modified; the returned dict is a new object
    so the live headers used for the network call stay intact.

    Args:
        headers: The request headers, or None.

    Returns:
        A new dict where every sensitive header value is replaced with
        ``REMOVED_HEADER_MESSAGE``.

    Example:
        ```pycon
        >>> from apirequest.utils.redact import clean_sensitive_headers
        >>> clean_sensitive_headers({"Authorization": "Bearer abc", "Accept": "*/*"})
        {'Authorization': '[REMOVED BY SDK]', 'Accept': '*/*'}
        >>> clean_sensitive_headers(None)
        {}

        ```
    """
    if not headers:
        return {}
    return {
        name: REMOVED_HEADER_MESSAGE if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }
