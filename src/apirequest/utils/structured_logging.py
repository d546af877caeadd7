r"""Structured logging utilities for machine-readable log output.

The request core logs attempt outcomes with structured fields (method,
url, status, attempt). With the default formatter they only add to the
message; with ``StructuredFormatter`` every record is emitted as one JSON
object, including those fields and the current request id.

Example:
    Enable structured logging for apirequest:

    ```python
    import logging
    from apirequest.utils.structured_logging import StructuredFormatter, request_id_context

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger("apirequest")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    with request_id_context("req-123"):
        ...
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "get_request_id",
    "log_structured",
    "request_id_context",
    "set_request_id",
]

import contextvars
import json
import logging
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Generator

_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "apirequest_request_id", default=None
)

# Attributes present on every LogRecord; anything else came from ``extra``
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "taskName",
}


def get_request_id() -> str | None:
    """Get the request id of the current context.

    Example:
        ```pycon
        >>> from apirequest.utils.structured_logging import get_request_id, request_id_context
        >>> with request_id_context("req-1"):
        ...     get_request_id()
        ...
        'req-1'

        ```
    """
    return _request_id.get()


def set_request_id(request_id: str | None) -> contextvars.Token:
    """Set the request id of the current context.

    Args:
        request_id: The id to attach to log records, or None to clear it.

    Returns:
        A token that restores the previous value with
        ``contextvars.ContextVar.reset``.
    """
    return _request_id.set(request_id)


@contextmanager
def request_id_context(request_id: str) -> Generator[None, None, None]:
    r"""Attach a request id to every record logged inside the block."""
    token = set_request_id(request_id)
    try:
        yield
    finally:
        _request_id.reset(token)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Standard fields: ``timestamp`` (ISO 8601, UTC), ``level``, ``logger``,
    ``message``, ``module``, ``function``, ``line``; plus ``request_id``
    when set, ``exception`` when present and every ``extra`` field.
    Values that are not JSON serializable are rendered with ``str``.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        request_id = get_request_id()
        if request_id is not None:
            log_data["request_id"] = request_id
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value
        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def log_structured(logger: logging.Logger, level: int, message: str, **extra: Any) -> None:
    """Log a message with structured fields.

    Args:
        logger: Logger to use.
        level: Log level (e.g., ``logging.DEBUG``).
        message: Log message.
        **extra: Structured fields attached to the record.
    """
    logger.log(level, message, extra=extra)
