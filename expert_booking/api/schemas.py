from datetime import date as Date, datetime, time

from pydantic import BaseModel, Field

from expert_booking.application.use_cases.booking_workflow import BookingWorkflow
from expert_booking.domain.entities.availability import WeeklyAvailabilityRule
from expert_booking.domain.entities.booking import Booking, BookingStatus, Location, PaymentStatus
from expert_booking.domain.entities.booking_draft import BookingDraft
from expert_booking.domain.entities.expert import Expert
from expert_booking.domain.entities.service import Service
from expert_booking.domain.entities.time_slot import TimeSlot
from expert_booking.domain.entities.user import User
from expert_booking.domain.entities.workflow_step import WorkflowStep


class LoginRequestSchema(BaseModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)


class RegisterRequestSchema(BaseModel):
    name: str = Field(min_length=2)
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)
    role: str = "client"


class UserSchema(BaseModel):
    id: str
    name: str
    email: str
    role: str

    @classmethod
    def from_entity(cls, user: User) -> "UserSchema":
        return cls(id=user.id, name=user.name, email=user.email, role=user.role)


class ServiceSchema(BaseModel):
    id: str
    name: str
    duration_minutes: int
    price: float
    currency: str
    max_participants: int
    description: str | None = None
    category: str | None = None

    @classmethod
    def from_entity(cls, service: Service) -> "ServiceSchema":
        return cls(
            id=service.id,
            name=service.name,
            duration_minutes=service.duration_minutes,
            price=service.price,
            currency=service.currency,
            max_participants=service.max_participants,
            description=service.description,
            category=service.category,
        )


class AvailabilityRuleSchema(BaseModel):
    day_of_week: int
    start_time: time
    end_time: time
    is_available: bool
    buffer_minutes: int

    @classmethod
    def from_entity(cls, rule: WeeklyAvailabilityRule) -> "AvailabilityRuleSchema":
        return cls(
            day_of_week=rule.day_of_week,
            start_time=rule.start_time,
            end_time=rule.end_time,
            is_available=rule.is_available,
            buffer_minutes=rule.buffer_minutes,
        )


class ExpertSchema(BaseModel):
    id: str
    name: str
    title: str | None = None
    timezone: str | None = None
    hourly_rate: float | None = None
    status: str
    availability: list[AvailabilityRuleSchema] = Field(default_factory=list)
    services: list[ServiceSchema] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, expert: Expert) -> "ExpertSchema":
        return cls(
            id=expert.id,
            name=expert.name,
            title=expert.title,
            timezone=expert.timezone,
            hourly_rate=expert.hourly_rate,
            status=expert.status,
            availability=[AvailabilityRuleSchema.from_entity(r) for r in expert.availability],
            services=[ServiceSchema.from_entity(s) for s in expert.services],
        )


class ExpertListSchema(BaseModel):
    experts: list[ExpertSchema]
    total: int


class AvailabilitySchema(BaseModel):
    expert_id: str
    date: Date
    available_slots: list[str]
    timezone: str
    duration: int
    stale: bool = False


class TimeSlotSchema(BaseModel):
    id: str
    start_time: datetime
    end_time: datetime
    duration_minutes: int
    available: bool
    price: float
    currency: str
    buffer_before: int
    buffer_after: int

    @classmethod
    def from_entity(cls, slot: TimeSlot) -> "TimeSlotSchema":
        return cls(
            id=slot.id,
            start_time=slot.start_time,
            end_time=slot.end_time,
            duration_minutes=slot.duration_minutes,
            available=slot.available,
            price=slot.price,
            currency=slot.currency,
            buffer_before=slot.buffer_before,
            buffer_after=slot.buffer_after,
        )


class BookingSchema(BaseModel):
    id: str
    expert_id: str
    service_id: str
    start_time: datetime
    end_time: datetime
    status: BookingStatus
    payment_status: PaymentStatus
    participants: int
    location: Location
    notes: str = ""
    amount: float | None = None
    currency: str | None = None

    @classmethod
    def from_entity(cls, booking: Booking) -> "BookingSchema":
        return cls(
            id=booking.id,
            expert_id=booking.expert_id,
            service_id=booking.service_id,
            start_time=booking.start_time,
            end_time=booking.end_time,
            status=booking.status,
            payment_status=booking.payment_status,
            participants=booking.participants,
            location=booking.location,
            notes=booking.notes,
            amount=booking.amount,
            currency=booking.currency,
        )


class BookingListSchema(BaseModel):
    bookings: list[BookingSchema]
    total: int


class RescheduleRequestSchema(BaseModel):
    start_time: datetime
    end_time: datetime


class DraftSchema(BaseModel):
    service: ServiceSchema | None = None
    date: Date | None = None
    time_slot: TimeSlotSchema | None = None
    participant_count: int
    location: Location
    notes: str

    @classmethod
    def from_entity(cls, draft: BookingDraft) -> "DraftSchema":
        return cls(
            service=ServiceSchema.from_entity(draft.service) if draft.service else None,
            date=draft.date,
            time_slot=TimeSlotSchema.from_entity(draft.time_slot) if draft.time_slot else None,
            participant_count=draft.participant_count,
            location=draft.location,
            notes=draft.notes,
        )


class StartWorkflowRequestSchema(BaseModel):
    expert_id: str


class SelectServiceRequestSchema(BaseModel):
    service_id: str


class SelectDateRequestSchema(BaseModel):
    date: Date


class SelectSlotRequestSchema(BaseModel):
    slot_id: str


class DetailsRequestSchema(BaseModel):
    participant_count: int = 1
    location: str = Location.online.value
    notes: str = Field(default="", max_length=2000)


class WorkflowSchema(BaseModel):
    id: str
    expert_id: str
    step: WorkflowStep
    action: str | None = None
    message: str | None = None
    draft: DraftSchema | None = None
    slots: list[TimeSlotSchema] = Field(default_factory=list)
    booking: BookingSchema | None = None
    last_error: str | None = None

    @classmethod
    def from_workflow(
        cls,
        workflow: BookingWorkflow,
        action: str | None = None,
        message: str | None = None,
    ) -> "WorkflowSchema":
        return cls(
            id=workflow.id,
            expert_id=workflow.expert.id,
            step=workflow.step,
            action=action,
            message=message,
            draft=DraftSchema.from_entity(workflow.draft) if workflow.draft else None,
            slots=[TimeSlotSchema.from_entity(s) for s in workflow.slots],
            booking=BookingSchema.from_entity(workflow.booking) if workflow.booking else None,
            last_error=workflow.last_error,
        )


class EventAckSchema(BaseModel):
    event: str
    delivered: int
