from __future__ import annotations

import logging
from typing import Callable

from expert_booking.application.ports.event_bus import EventBusPort
from expert_booking.application.ports.workflow_store import WorkflowStorePort
from expert_booking.domain.entities.booking_event import (
    BOOKING_CANCELLED,
    BOOKING_CREATED,
    BOOKING_UPDATED,
    BookingEvent,
)


class SyncBookingEventsUseCase:
    """Feeds server-pushed booking events into the workflows that created those bookings."""

    def __init__(self, store: WorkflowStorePort) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    def attach(self, bus: EventBusPort) -> Callable[[], None]:
        unsubscribers = [
            bus.subscribe(kind, self.handle)
            for kind in (BOOKING_CREATED, BOOKING_UPDATED, BOOKING_CANCELLED)
        ]

        def detach() -> None:
            for unsubscribe in unsubscribers:
                unsubscribe()

        return detach

    def handle(self, event: BookingEvent) -> int:
        if not event.booking_id:
            return 0
        applied = 0
        for workflow in self._store.find_by_booking(event.booking_id):
            if workflow.apply_event(event):
                applied += 1
        self._logger.debug(
            "Booking event dispatched",
            extra={"booking_id": event.booking_id, "event": event.kind, "applied": applied},
        )
        return applied
