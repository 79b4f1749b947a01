from __future__ import annotations

from dataclasses import dataclass
from datetime import time


@dataclass(frozen=True)
class WeeklyAvailabilityRule:
    day_of_week: int  # 0 = Sunday ... 6 = Saturday
    start_time: time
    end_time: time
    is_available: bool = True
    buffer_minutes: int = 0
