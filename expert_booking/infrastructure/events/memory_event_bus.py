from __future__ import annotations

import logging
import threading
from typing import Callable

from expert_booking.application.ports.event_bus import EventBusPort, EventHandler
from expert_booking.domain.entities.booking_event import BookingEvent


class MemoryEventBus(EventBusPort):
    """In-process subscription registry. The socket transport feeds it through ``publish``."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def subscribe(self, kind: str, handler: EventHandler) -> Callable[[], None]:
        with self._lock:
            self._handlers.setdefault(kind, []).append(handler)

        def unsubscribe() -> None:
            self.unsubscribe(kind, handler)

        return unsubscribe

    def unsubscribe(self, kind: str, handler: EventHandler) -> bool:
        with self._lock:
            handlers = self._handlers.get(kind, [])
            if handler not in handlers:
                return False
            handlers.remove(handler)
            if not handlers:
                del self._handlers[kind]
            return True

    def publish(self, event: BookingEvent) -> int:
        with self._lock:
            handlers = list(self._handlers.get(event.kind, []))

        delivered = 0
        for handler in handlers:
            try:
                handler(event)
                delivered += 1
            except Exception as e:
                self._logger.exception(
                    "Event handler failed",
                    extra={"event": event.kind, "booking_id": event.booking_id, "error": str(e)},
                )
        return delivered

    def subscriber_count(self, kind: str) -> int:
        with self._lock:
            return len(self._handlers.get(kind, []))
