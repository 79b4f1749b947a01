from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from expert_booking.domain.entities.booking import Location
from expert_booking.domain.entities.service import Service
from expert_booking.domain.entities.time_slot import TimeSlot


@dataclass(frozen=True)
class BookingDraft:
    service: Service | None = None
    date: date | None = None
    time_slot: TimeSlot | None = None
    participant_count: int = 1
    location: Location = Location.online
    notes: str = ""
