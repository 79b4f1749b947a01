from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class BookingStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    in_progress = "in-progress"
    completed = "completed"
    cancelled = "cancelled"
    rescheduled = "rescheduled"


class PaymentStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    refunded = "refunded"
    failed = "failed"


class Location(str, Enum):
    online = "online"
    in_person = "in-person"


@dataclass(frozen=True)
class Booking:
    id: str
    expert_id: str
    service_id: str
    start_time: datetime
    end_time: datetime
    status: BookingStatus = BookingStatus.pending
    payment_status: PaymentStatus = PaymentStatus.pending
    participants: int = 1
    location: Location = Location.online
    notes: str = ""
    amount: float | None = None
    currency: str | None = None
    created_at: datetime | None = None
