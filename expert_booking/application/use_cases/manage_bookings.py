from __future__ import annotations

import logging
from datetime import datetime

from expert_booking.application.exceptions import BookingValidationError
from expert_booking.application.ports.booking_api import BookingApiPort
from expert_booking.domain.entities.booking import Booking, BookingStatus

_FINAL_STATUSES = (BookingStatus.cancelled, BookingStatus.completed)


class ManageBookingsUseCase:
    """Dashboard operations on existing bookings. The server stays authoritative on status."""

    def __init__(self, api: BookingApiPort) -> None:
        self._api = api
        self._logger = logging.getLogger(__name__)

    def list_bookings(self, status: str | None = None, page: int = 1, limit: int = 20) -> tuple[list[Booking], int]:
        if status is not None:
            try:
                BookingStatus(status)
            except ValueError:
                raise BookingValidationError(f"Unknown booking status: {status}")
        return self._api.list_bookings(status=status, page=page, limit=limit)

    def get_booking(self, booking_id: str) -> Booking:
        return self._api.get_booking(booking_id)

    def cancel(self, booking_id: str) -> Booking:
        booking = self._api.get_booking(booking_id)
        if booking.status in _FINAL_STATUSES:
            raise BookingValidationError(f"Booking {booking_id} is already {booking.status.value}")
        self._api.cancel_booking(booking_id)
        self._logger.info("Booking cancellation requested", extra={"booking_id": booking_id})
        return self._api.get_booking(booking_id)

    def reschedule(self, booking_id: str, start_time: datetime, end_time: datetime) -> Booking:
        if end_time <= start_time:
            raise BookingValidationError("End time must be after start time")
        booking = self._api.get_booking(booking_id)
        if booking.status in _FINAL_STATUSES:
            raise BookingValidationError(f"Booking {booking_id} is already {booking.status.value}")
        updated = self._api.reschedule_booking(booking_id, start_time, end_time)
        self._logger.info(
            "Booking reschedule requested",
            extra={"booking_id": booking_id, "status": updated.status.value},
        )
        return updated
