from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from expert_booking.domain.entities.booking import Booking

BOOKING_CREATED = "booking:created"
BOOKING_UPDATED = "booking:updated"
BOOKING_CANCELLED = "booking:cancelled"
EXPERT_STATUS = "expert:status"

EVENT_KINDS = (BOOKING_CREATED, BOOKING_UPDATED, BOOKING_CANCELLED, EXPERT_STATUS)


@dataclass(frozen=True)
class BookingEvent:
    kind: str
    booking_id: str | None = None
    booking: Booking | None = None
    expert_id: str | None = None
    status: str | None = None
    payload: dict[str, Any] | None = None
