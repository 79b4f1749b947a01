from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from expert_booking.domain.entities.booking_event import BookingEvent

EventHandler = Callable[[BookingEvent], None]


class EventBusPort(ABC):
    @abstractmethod
    def subscribe(self, kind: str, handler: EventHandler) -> Callable[[], None]:
        """Register handler for an event kind. Returns an unsubscribe callable."""
        raise NotImplementedError

    @abstractmethod
    def unsubscribe(self, kind: str, handler: EventHandler) -> bool:
        raise NotImplementedError

    @abstractmethod
    def publish(self, event: BookingEvent) -> int:
        """Deliver event to its subscribers. Returns the number of handlers called."""
        raise NotImplementedError
