r"""Observer channel for request attempts.

Every attempt's outcome is published on an EventBus as a ``response``
event with ``(error, response)`` arguments, whether or not the attempt is
later retried. This lets passive observers such as logging or metrics
hooks see all traffic, independently of the single terminal delivery to
the completion callback.
"""

from __future__ import annotations

__all__ = ["RESPONSE_EVENT", "EventBus"]

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)

# Name of the event emitted once per attempt
RESPONSE_EVENT = "response"


class EventBus:
    """Multi-subscriber event channel.

    Listeners run synchronously, in subscription order, when an event is
    emitted. An exception raised by a listener is logged and does not
    prevent the remaining listeners from running.

    Example:
        ```pycon
        >>> from apirequest.events import EventBus
        >>> bus = EventBus()
        >>> seen = []
        >>> _ = bus.on("response", lambda error, response: seen.append(response))
        >>> bus.emit("response", None, "ok")
        True
        >>> seen
        ['ok']

        ```
    """

    def __init__(self) -> None:
        self._listeners: defaultdict[str, list[tuple[Callable[..., Any], bool]]] = defaultdict(
            list
        )

    def on(self, event: str, listener: Callable[..., Any]) -> Callable[..., Any]:
        """Subscribe a listener to an event.

        Args:
            event: The event name.
            listener: The callable invoked with the emitted arguments.

        Returns:
            The listener, so the method can be used as a decorator.
        """
        self._listeners[event].append((listener, False))
        return listener

    def once(self, event: str, listener: Callable[..., Any]) -> Callable[..., Any]:
        r"""Subscribe a listener that is removed after its first call."""
        self._listeners[event].append((listener, True))
        return listener

    def off(self, event: str, listener: Callable[..., Any]) -> None:
        r"""Unsubscribe every registration of a listener from an event."""
        self._listeners[event] = [
            (registered, once)
            for registered, once in self._listeners[event]
            if registered is not listener
        ]

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def emit(self, event: str, *args: Any) -> bool:
        """Call every listener of an event with the given arguments.

        Args:
            event: The event name.
            *args: Positional arguments passed to each listener.

        Returns:
            True if the event had listeners.
        """
        registrations = list(self._listeners.get(event, ()))
        if not registrations:
            return False
        fired_once = [registration for registration in registrations if registration[1]]
        if fired_once:
            self._listeners[event] = [
                registration
                for registration in self._listeners[event]
                if registration not in fired_once
            ]
        for listener, _ in registrations:
            try:
                listener(*args)
            except Exception:
                logger.exception(f"Listener {listener!r} for {event!r} event failed")
        return True
