from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TimeSlot:
    id: str  # "{YYYY-MM-DD}-{HH}-{MM}", unique per resolver call only
    start_time: datetime
    end_time: datetime
    duration_minutes: int
    available: bool
    price: float
    currency: str
    buffer_before: int = 0
    buffer_after: int = 0
