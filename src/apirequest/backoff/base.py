r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy maps the number of retries performed so far to the
    wait, in milliseconds, before the next attempt.
    """

    @abstractmethod
    def calculate(self, num_retries: int) -> float:
        """Calculate the backoff delay before the next attempt.

        Args:
            num_retries: The number of retries including the one being
                scheduled (1-indexed). ``num_retries=1`` is the first retry.

        Returns:
            The delay in milliseconds.
        """
