from __future__ import annotations

from dataclasses import dataclass

from expert_booking.domain.entities.availability import WeeklyAvailabilityRule
from expert_booking.domain.entities.service import Service

EXPERT_STATUSES = ("available", "busy", "offline")


@dataclass(frozen=True)
class Expert:
    id: str
    name: str
    title: str | None = None
    timezone: str | None = None
    hourly_rate: float | None = None
    status: str = "offline"
    availability: tuple[WeeklyAvailabilityRule, ...] = ()
    services: tuple[Service, ...] = ()

    def get_service(self, service_id: str) -> Service | None:
        for service in self.services:
            if service.id == service_id:
                return service
        return None

    @property
    def default_service(self) -> Service | None:
        """First bookable service; inactive or zero-length offerings are skipped."""
        for service in self.services:
            if service.is_active and service.duration_minutes > 0:
                return service
        return None
