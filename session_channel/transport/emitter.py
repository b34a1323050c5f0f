"""Named-event listener registry shared by channel transports."""

from __future__ import annotations

import logging
from typing import Any
from collections import defaultdict
from collections.abc import Callable

logger = logging.getLogger(__name__)

Listener = Callable[..., None]
AnyListener = Callable[[str, Any], None]


class EventTransport:
    """Base for transports that deliver named events to registered listeners.

    Listeners run synchronously on the event loop. A listener that raises is
    logged and skipped so one faulty observer cannot stall the read loop.
    """

    def __init__(self) -> None:
        self._listeners: defaultdict[str, list[Listener]] = defaultdict(list)
        self._any_listeners: list[AnyListener] = []

    def on(self, event: str, handler: Listener) -> None:
        self._listeners[event].append(handler)

    def off(self, event: str, handler: Listener | None = None) -> None:
        if handler is None:
            self._listeners.pop(event, None)
            return
        handlers = self._listeners.get(event)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def on_any(self, handler: AnyListener) -> None:
        """Observe every inbound server event (not lifecycle events) before per-name listeners."""
        self._any_listeners.append(handler)

    def remove_all_listeners(self) -> None:
        self._listeners.clear()
        self._any_listeners.clear()

    def listener_count(self, event: str | None = None) -> int:
        if event is not None:
            return len(self._listeners.get(event, ()))
        return sum(len(handlers) for handlers in self._listeners.values()) + len(self._any_listeners)

    def _dispatch(self, event: str, *args: Any) -> None:
        for handler in list(self._listeners.get(event, ())):
            try:
                handler(*args)
            except Exception:
                logger.exception("listener for '%s' failed", event)

    def _dispatch_inbound(self, event: str, payload: Any) -> None:
        for handler in list(self._any_listeners):
            try:
                handler(event, payload)
            except Exception:
                logger.exception("catch-all listener failed for '%s'", event)
        self._dispatch(event, payload)


__all__ = ["AnyListener", "EventTransport", "Listener"]
