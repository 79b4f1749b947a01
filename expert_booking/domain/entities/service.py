from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Service:
    id: str
    name: str
    duration_minutes: int
    price: float
    currency: str = "USD"
    max_participants: int = 1
    description: str | None = None
    category: str | None = None
    is_active: bool = True
