"""Event sink for exchange observers.

The engines emit one event per successful operation. EventLog keeps every
event in emission order and forwards it to subscribers (indexers, tests).
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Protocol, runtime_checkable

import structlog

from simpledex.models.events import AnyEvent

logger = structlog.get_logger()

EventCallback = Callable[[AnyEvent], None]


@runtime_checkable
class EventSink(Protocol):
    """Protocol for anything that accepts exchange events."""

    def emit(self, event: AnyEvent) -> None:
        """Record or forward an event.

        Called once the operation has committed and its pair lock is released.
        """
        ...


class EventLog:
    """In-memory, ordered event recorder with subscribers.

    Usage:
        log = EventLog()
        log.subscribe(lambda e: print(e.name, e.args))
        dex = SimpleDEX(ledger, events=log)
        ...
        swap = log.last("Swap")
        amount_out = swap.args[4]
    """

    def __init__(self) -> None:
        self._events: list[AnyEvent] = []
        self._subscribers: list[EventCallback] = []
        self._lock = threading.Lock()

    def emit(self, event: AnyEvent) -> None:
        """Append the event, then notify subscribers in registration order.

        A failing subscriber is logged and skipped; the operation that
        produced the event has already taken effect.
        """
        with self._lock:
            self._events.append(event)
            subscribers = list(self._subscribers)
        logger.debug("event_emitted", event_name=event.name)
        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception("event_subscriber_failed", event_name=event.name)

    def subscribe(self, callback: EventCallback) -> Callable[[], None]:
        """Register a callback; returns a function that unsubscribes it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def events(self, name: str | None = None) -> list[AnyEvent]:
        """All recorded events, optionally filtered by event name."""
        with self._lock:
            if name is None:
                return list(self._events)
            return [e for e in self._events if e.name == name]

    def last(self, name: str | None = None) -> AnyEvent | None:
        """Most recent event (of a given name), or None."""
        matching = self.events(name)
        return matching[-1] if matching else None

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        return len(self._events)


__all__ = ["EventSink", "EventLog", "EventCallback"]
