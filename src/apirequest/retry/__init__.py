r"""Retry package: classification, attempt state, delay calculation and
the retry state machine.

Public API:
    - AttemptState: Mutable attempt bookkeeping of one logical operation
    - RetryDecider: Logic for deciding whether a request may be retried
    - RetryStrategy: Strategy for calculating retry delays
    - RetryController: Retry state machine
"""

from __future__ import annotations

__all__ = [
    "AttemptState",
    "RetryController",
    "RetryDecider",
    "RetryDecision",
    "RetryOptions",
    "RetryState",
    "RetryStrategy",
    "classify_status",
    "is_temporary_error",
]

from apirequest.retry.controller import RetryController, RetryState
from apirequest.retry.decider import RetryDecider, classify_status, is_temporary_error
from apirequest.retry.state import AttemptState
from apirequest.retry.strategy import RetryDecision, RetryOptions, RetryStrategy
