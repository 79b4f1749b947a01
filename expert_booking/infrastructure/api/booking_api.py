from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

from expert_booking.application.dto.api_payloads import (
    AvailabilityResponseDTO,
    BookingDTO,
    BookingListDTO,
    ExpertDTO,
    ExpertListDTO,
    parse_payload,
)
from expert_booking.application.ports.booking_api import BookingApiPort
from expert_booking.domain.entities.booking import Booking, Location
from expert_booking.domain.entities.expert import Expert
from expert_booking.infrastructure.api.http_client import ApiClient


class HttpBookingApi(BookingApiPort):
    def __init__(self, client: ApiClient) -> None:
        self._client = client
        self._logger = logging.getLogger(__name__)

    def list_experts(self, filters: dict[str, Any] | None = None) -> tuple[list[Expert], int]:
        data = self._client.get("/experts", params=filters or None)
        page = parse_payload(ExpertListDTO, data)
        return [dto.to_entity() for dto in page.experts], page.total

    def get_expert(self, expert_id: str) -> Expert:
        data = self._client.get(f"/experts/{expert_id}")
        return parse_payload(ExpertDTO, data).to_entity()

    def get_availability(self, expert_id: str, day: date) -> tuple[list[str], str, int]:
        data = self._client.get(f"/experts/{expert_id}/availability", params={"date": day.isoformat()})
        availability = parse_payload(AvailabilityResponseDTO, data)
        return availability.available_slots, availability.timezone, availability.duration

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
        payload = {
            "expertId": expert_id,
            "serviceId": service_id,
            "startTime": start_time.isoformat(),
            "endTime": end_time.isoformat(),
            "participants": participants,
            "notes": notes,
            "location": Location(location).value,
        }
        data = self._client.post("/bookings", json=payload)
        booking = parse_payload(BookingDTO, data).to_entity()
        self._logger.info("Booking request accepted", extra={"booking_id": booking.id, "expert_id": expert_id})
        return booking

    def list_bookings(
        self,
        status: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Booking], int]:
        params: dict[str, Any] = {"page": page, "limit": limit}
        if status:
            params["status"] = status
        data = self._client.get("/bookings", params=params)
        result = parse_payload(BookingListDTO, data)
        return [dto.to_entity() for dto in result.bookings], result.total

    def get_booking(self, booking_id: str) -> Booking:
        data = self._client.get(f"/bookings/{booking_id}")
        return parse_payload(BookingDTO, data).to_entity()

    def cancel_booking(self, booking_id: str) -> None:
        self._client.post(f"/bookings/{booking_id}/cancel")

    def reschedule_booking(self, booking_id: str, start_time: datetime, end_time: datetime) -> Booking:
        data = self._client.post(
            f"/bookings/{booking_id}/reschedule",
            json={"startTime": start_time.isoformat(), "endTime": end_time.isoformat()},
        )
        return parse_payload(BookingDTO, data).to_entity()
