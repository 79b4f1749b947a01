from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any

from expert_booking.domain.entities.booking import Booking, Location
from expert_booking.domain.entities.expert import Expert


class BookingApiPort(ABC):
    @abstractmethod
    def list_experts(self, filters: dict[str, Any] | None = None) -> tuple[list[Expert], int]:
        """List experts matching filters. Returns (experts, total)."""
        raise NotImplementedError

    @abstractmethod
    def get_expert(self, expert_id: str) -> Expert:
        raise NotImplementedError

    @abstractmethod
    def get_availability(self, expert_id: str, day: date) -> tuple[list[str], str, int]:
        """Remote availability for a day. Returns (available_slots, timezone, duration)."""
        raise NotImplementedError

    @abstractmethod
    def create_booking(
        self,
        expert_id: str,
        service_id: str,
        start_time: datetime,
        end_time: datetime,
        participants: int,
        location: Location,
        notes: str = "",
    ) -> Booking:
        raise NotImplementedError

    @abstractmethod
    def list_bookings(
        self,
        status: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Booking], int]:
        """List the current user's bookings. Returns (bookings, total)."""
        raise NotImplementedError

    @abstractmethod
    def get_booking(self, booking_id: str) -> Booking:
        raise NotImplementedError

    @abstractmethod
    def cancel_booking(self, booking_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def reschedule_booking(self, booking_id: str, start_time: datetime, end_time: datetime) -> Booking:
        raise NotImplementedError
