from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from expert_booking.application.dto.api_payloads import BookingDTO
from expert_booking.domain.entities.booking_event import EVENT_KINDS, BookingEvent


class BookingEventDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    event: str
    data: Any = None

    @field_validator("event")
    @classmethod
    def _known_kind(cls, value: str) -> str:
        if value not in EVENT_KINDS:
            raise ValueError(f"Unsupported event kind: {value}")
        return value

    def to_event(self) -> BookingEvent:
        """
        Normalize a pushed message into a BookingEvent.
        booking:cancelled carries only the booking id; booking:created and
        booking:updated carry the booking; expert:status carries {expertId, status}.
        """
        data = self.data
        if isinstance(data, str):
            return BookingEvent(kind=self.event, booking_id=data)

        payload: dict[str, Any] = dict(data or {}) if isinstance(data, dict) else {}

        if "startTime" in payload and "id" in payload:
            booking = BookingDTO.model_validate(payload).to_entity()
            return BookingEvent(
                kind=self.event,
                booking_id=booking.id,
                booking=booking,
                expert_id=booking.expert_id,
                status=booking.status.value,
                payload=payload,
            )

        booking_id = payload.get("bookingId") or payload.get("id")
        return BookingEvent(
            kind=self.event,
            booking_id=str(booking_id) if booking_id is not None else None,
            expert_id=payload.get("expertId"),
            status=payload.get("status"),
            payload=payload,
        )
