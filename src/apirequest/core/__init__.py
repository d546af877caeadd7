r"""Core configuration and validation shared by the request executor."""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_RETRY_INTERVAL_MS",
    "DEFAULT_TIMEOUT",
    "RETRY_RANDOMIZATION_FACTOR",
    "RequestConfig",
    "RetryPolicy",
    "validate_retry_policy",
    "validate_timeout",
]

from apirequest.core.config import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_INTERVAL_MS,
    DEFAULT_TIMEOUT,
    RETRY_RANDOMIZATION_FACTOR,
    RequestConfig,
    RetryPolicy,
)
from apirequest.core.validation import validate_retry_policy, validate_timeout
