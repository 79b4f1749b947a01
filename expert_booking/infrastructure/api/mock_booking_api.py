from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Any

from expert_booking.application.exceptions import BookingApiError
from expert_booking.application.ports.booking_api import BookingApiPort
from expert_booking.application.utils.availability import DEFAULT_DURATION_MINUTES, resolve_time_slots
from expert_booking.domain.entities.booking import Booking, BookingStatus, Location
from expert_booking.domain.entities.expert import Expert
from expert_booking.infrastructure.api.mock_data import MOCK_EXPERTS


class MockBookingApi(BookingApiPort):
    """In-memory stand-in for the marketplace API used in dev/local."""

    def __init__(self, experts: dict[str, Expert] | None = None) -> None:
        self._experts = dict(experts if experts is not None else MOCK_EXPERTS)
        self._bookings: dict[str, Booking] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def list_experts(self, filters: dict[str, Any] | None = None) -> tuple[list[Expert], int]:
        filters = filters or {}
        experts = list(self._experts.values())

        search = str(filters.get("search") or "").lower()
        if search:
            experts = [e for e in experts if search in e.name.lower() or search in (e.title or "").lower()]

        category = filters.get("category")
        if category:
            experts = [e for e in experts if any(s.category == category for s in e.services)]

        if filters.get("sortBy") == "price":
            experts.sort(key=lambda e: e.hourly_rate or 0)

        page = max(int(filters.get("page") or 1), 1)
        limit = max(int(filters.get("limit") or 20), 1)
        start = (page - 1) * limit
        return experts[start : start + limit], len(experts)

    def get_expert(self, expert_id: str) -> Expert:
        expert = self._experts.get(expert_id)
        if expert is None:
            raise BookingApiError(f"Expert {expert_id} not found", status_code=404)
        return expert

    def get_availability(self, expert_id: str, day: date) -> tuple[list[str], str, int]:
        expert = self.get_expert(expert_id)
        default = expert.default_service
        slots = resolve_time_slots(expert.availability, day, fallback_service=default)
        with self._lock:
            taken = [
                b for b in self._bookings.values()
                if b.expert_id == expert_id and b.status != BookingStatus.cancelled
            ]
        free = [
            slot.start_time.strftime("%H:%M")
            for slot in slots
            if not any(_overlaps(slot.start_time, slot.end_time, b.start_time, b.end_time) for b in taken)
        ]
        duration = default.duration_minutes if default else DEFAULT_DURATION_MINUTES
        return free, expert.timezone or "UTC", duration

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
        expert = self.get_expert(expert_id)
        service = expert.get_service(service_id)
        if service is None:
            raise BookingApiError(f"Service {service_id} not found", status_code=400)

        with self._lock:
            booking_id = f"mock_booking_{len(self._bookings) + 1}"
            booking = Booking(
                id=booking_id,
                expert_id=expert_id,
                service_id=service_id,
                start_time=start_time,
                end_time=end_time,
                status=BookingStatus.pending,
                participants=participants,
                location=Location(location),
                notes=notes,
                amount=service.price,
                currency=service.currency,
                created_at=datetime.now(timezone.utc),
            )
            self._bookings[booking_id] = booking

        self._logger.info(
            "Mock booking created",
            extra={"booking_id": booking_id, "expert_id": expert_id, "start": start_time.isoformat()},
        )
        return booking

    def list_bookings(
        self,
        status: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Booking], int]:
        with self._lock:
            bookings = list(self._bookings.values())
        if status:
            bookings = [b for b in bookings if b.status.value == status]
        bookings.sort(key=lambda b: b.start_time)
        start = (max(page, 1) - 1) * limit
        return bookings[start : start + limit], len(bookings)

    def get_booking(self, booking_id: str) -> Booking:
        with self._lock:
            booking = self._bookings.get(booking_id)
        if booking is None:
            raise BookingApiError(f"Booking {booking_id} not found", status_code=404)
        return booking

    def cancel_booking(self, booking_id: str) -> None:
        booking = self.get_booking(booking_id)
        with self._lock:
            self._bookings[booking_id] = replace(booking, status=BookingStatus.cancelled)
        self._logger.info("Mock booking cancelled", extra={"booking_id": booking_id})

    def reschedule_booking(self, booking_id: str, start_time: datetime, end_time: datetime) -> Booking:
        booking = self.get_booking(booking_id)
        updated = replace(booking, start_time=start_time, end_time=end_time, status=BookingStatus.rescheduled)
        with self._lock:
            self._bookings[booking_id] = updated
        self._logger.info("Mock booking rescheduled", extra={"booking_id": booking_id})
        return updated


def _overlaps(start: datetime, end: datetime, other_start: datetime, other_end: datetime) -> bool:
    # Naive slot times are compared against the naive wall-clock times stored on bookings.
    if (start.tzinfo is None) != (other_start.tzinfo is None):
        start, end = start.replace(tzinfo=None), end.replace(tzinfo=None)
        other_start, other_end = other_start.replace(tzinfo=None), other_end.replace(tzinfo=None)
    return not (end <= other_start or start >= other_end)
