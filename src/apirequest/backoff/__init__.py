r"""Backoff strategies for retry delays."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "ExponentialBackoff", "get_retry_timeout"]

from apirequest.backoff.base import BaseBackoffStrategy
from apirequest.backoff.exponential import ExponentialBackoff, get_retry_timeout
