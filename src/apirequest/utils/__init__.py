r"""Utility functions for the request core."""

from __future__ import annotations

__all__ = [
    "REMOVED_HEADER_MESSAGE",
    "clean_sensitive_headers",
    "get_retry_after_ms",
    "log_structured",
    "parse_retry_after",
]

from apirequest.utils.redact import REMOVED_HEADER_MESSAGE, clean_sensitive_headers
from apirequest.utils.retry_after import get_retry_after_ms, parse_retry_after
from apirequest.utils.structured_logging import log_structured
