"""
Response models for the marketplace API.

Every payload coming back from the remote API is validated here before it
reaches the resolver or the workflow. Field names follow the API's camelCase
wire format; ``to_entity`` converts into domain entities.
"""

from __future__ import annotations

from datetime import datetime, time
from typing import Any, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from expert_booking.application.exceptions import MalformedResponseError
from expert_booking.domain.entities.availability import WeeklyAvailabilityRule
from expert_booking.domain.entities.booking import Booking, BookingStatus, Location, PaymentStatus
from expert_booking.domain.entities.expert import Expert
from expert_booking.domain.entities.service import Service
from expert_booking.domain.entities.user import AuthSession, User

ModelT = TypeVar("ModelT", bound=BaseModel)


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class AvailabilityRuleDTO(_ApiModel):
    day_of_week: int = Field(alias="dayOfWeek", ge=0, le=6)
    start_time: time = Field(alias="startTime")
    end_time: time = Field(alias="endTime")
    is_available: bool = Field(default=True, alias="isAvailable")
    buffer_minutes: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("bufferMinutes", "bufferTime", "buffer_minutes"),
    )

    def to_entity(self) -> WeeklyAvailabilityRule:
        return WeeklyAvailabilityRule(
            day_of_week=self.day_of_week,
            start_time=self.start_time,
            end_time=self.end_time,
            is_available=self.is_available,
            buffer_minutes=self.buffer_minutes,
        )


class ServiceDTO(_ApiModel):
    id: str
    name: str
    duration_minutes: int = Field(
        gt=0,
        validation_alias=AliasChoices("durationMinutes", "duration", "duration_minutes"),
    )
    price: float = Field(ge=0)
    currency: str = "USD"
    max_participants: int | None = Field(default=None, alias="maxParticipants")
    description: str | None = None
    category: str | None = None
    is_active: bool = Field(default=True, alias="isActive")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    def to_entity(self) -> Service:
        return Service(
            id=self.id,
            name=self.name,
            duration_minutes=self.duration_minutes,
            price=self.price,
            currency=self.currency,
            max_participants=self.max_participants or 1,
            description=self.description,
            category=self.category,
            is_active=self.is_active,
        )


class ExpertDTO(_ApiModel):
    id: str
    name: str
    title: str | None = None
    timezone: str | None = None
    location: dict[str, Any] | None = None
    hourly_rate: float | None = Field(default=None, alias="hourlyRate")
    status: str = "offline"
    availability: list[AvailabilityRuleDTO] = Field(default_factory=list)
    services: list[ServiceDTO] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("availability", "services", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_entity(self) -> Expert:
        timezone = self.timezone or (self.location or {}).get("timezone")
        return Expert(
            id=self.id,
            name=self.name,
            title=self.title,
            timezone=timezone,
            hourly_rate=self.hourly_rate,
            status=self.status,
            availability=tuple(rule.to_entity() for rule in self.availability),
            services=tuple(service.to_entity() for service in self.services),
        )


class ExpertListDTO(_ApiModel):
    experts: list[ExpertDTO] = Field(default_factory=list)
    total: int = 0
    current_page: int = Field(default=1, alias="currentPage")
    total_pages: int = Field(default=1, alias="totalPages")
    has_more: bool = Field(default=False, alias="hasMore")


class AvailabilityResponseDTO(_ApiModel):
    available_slots: list[str] = Field(alias="availableSlots")
    timezone: str
    duration: int = Field(gt=0)


class PaymentDTO(_ApiModel):
    amount: float | None = None
    currency: str | None = None
    status: PaymentStatus = PaymentStatus.pending


class BookingDTO(_ApiModel):
    id: str
    expert_id: str = Field(alias="expertId")
    service_id: str = Field(default="", alias="serviceId")
    start_time: datetime = Field(alias="startTime")
    end_time: datetime = Field(alias="endTime")
    status: BookingStatus = BookingStatus.pending
    payment: PaymentDTO | None = None
    payment_status: PaymentStatus | None = Field(default=None, alias="paymentStatus")
    participants: int = 1
    location: Location = Location.online
    notes: str = ""
    created_at: datetime | None = Field(default=None, alias="createdAt")

    @field_validator("id", "expert_id", "service_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("participants", mode="before")
    @classmethod
    def _count_participants(cls, value: Any) -> Any:
        # The API sends either a head count or the list of participant records.
        if isinstance(value, list):
            return max(len(value), 1)
        return value

    @field_validator("location", mode="before")
    @classmethod
    def _location_type(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return value.get("type")
        return value

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, list):
            return "\n".join(str(note.get("content", "")) if isinstance(note, dict) else str(note) for note in value)
        return value

    def to_entity(self) -> Booking:
        payment = self.payment or PaymentDTO()
        return Booking(
            id=self.id,
            expert_id=self.expert_id,
            service_id=self.service_id,
            start_time=self.start_time,
            end_time=self.end_time,
            status=self.status,
            payment_status=self.payment_status or payment.status,
            participants=self.participants,
            location=self.location,
            notes=self.notes,
            amount=payment.amount,
            currency=payment.currency,
            created_at=self.created_at,
        )


class BookingListDTO(_ApiModel):
    bookings: list[BookingDTO] = Field(default_factory=list)
    total: int = 0
    current_page: int = Field(default=1, alias="currentPage")
    total_pages: int = Field(default=1, alias="totalPages")


class UserDTO(_ApiModel):
    id: str
    name: str
    email: str
    role: str = "client"

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    def to_entity(self) -> User:
        return User(id=self.id, name=self.name, email=self.email, role=self.role)


class AuthResponseDTO(_ApiModel):
    user: UserDTO
    token: str
    refresh_token: str | None = Field(default=None, alias="refreshToken")

    def to_entity(self) -> AuthSession:
        return AuthSession(user=self.user.to_entity(), token=self.token, refresh_token=self.refresh_token)


class TokenDTO(_ApiModel):
    token: str


def parse_payload(model: type[ModelT], payload: Any) -> ModelT:
    """Validate an API payload, mapping validation failures to MalformedResponseError."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise MalformedResponseError(f"Malformed {model.__name__} payload: {e.error_count()} error(s)") from e
