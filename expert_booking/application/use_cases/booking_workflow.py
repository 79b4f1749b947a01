from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from expert_booking.application.exceptions import (
    BookingApiError,
    BookingValidationError,
    WorkflowTransitionError,
)
from expert_booking.application.ports.booking_api import BookingApiPort
from expert_booking.application.utils.availability import resolve_time_slots
from expert_booking.domain.entities.booking import Booking, BookingStatus, Location
from expert_booking.domain.entities.booking_draft import BookingDraft
from expert_booking.domain.entities.booking_event import BOOKING_CANCELLED, BookingEvent
from expert_booking.domain.entities.expert import Expert
from expert_booking.domain.entities.time_slot import TimeSlot
from expert_booking.domain.entities.workflow_step import PREVIOUS_STEP, WorkflowStep

NO_SLOTS_MESSAGE = "No available time slots for this date."
BOOKING_FAILED_MESSAGE = "Failed to create booking. Please try again."


@dataclass(frozen=True)
class WorkflowResult:
    action: str
    step: WorkflowStep
    message: str | None = None
    slots: list[TimeSlot] | None = None
    booking: Booking | None = None


class BookingWorkflow:
    """
    One client's booking flow for one expert.

    service -> date -> details -> payment -> confirmation. Backward navigation
    is allowed until confirmation, which is terminal. Only ``submit_payment``
    talks to the API; every other transition changes the local draft.
    """

    def __init__(
        self,
        expert: Expert,
        api: BookingApiPort,
        workflow_id: str | None = None,
        timezone: str | None = None,
        today: Callable[[], date] | None = None,
    ) -> None:
        self.id = workflow_id or uuid.uuid4().hex
        self._expert = expert
        self._api = api
        self._tz = _safe_timezone(expert.timezone or timezone)
        self._today = today or (lambda: datetime.now(self._tz).date())
        self._lock = threading.RLock()
        self._logger = logging.getLogger(__name__)

        self._step = WorkflowStep.service
        self._draft: BookingDraft | None = BookingDraft()
        self._slots: list[TimeSlot] = []
        self._slots_for: tuple[date, str] | None = None
        self._booking: Booking | None = None
        self._last_error: str | None = None
        self._closed = False

    @property
    def expert(self) -> Expert:
        return self._expert

    @property
    def step(self) -> WorkflowStep:
        return self._step

    @property
    def draft(self) -> BookingDraft | None:
        return self._draft

    @property
    def slots(self) -> list[TimeSlot]:
        return list(self._slots)

    @property
    def booking(self) -> Booking | None:
        return self._booking

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @property
    def is_closed(self) -> bool:
        return self._closed

    def select_service(self, service_id: str) -> WorkflowResult:
        with self._lock:
            self._require_step(WorkflowStep.service)
            service = self._expert.get_service(service_id)
            if service is None or not service.is_active:
                raise BookingValidationError(f"Unknown service: {service_id}")
            if service.duration_minutes <= 0:
                raise BookingValidationError("Service duration must be greater than zero")

            draft = self._current_draft()
            if draft.service is None or draft.service.id != service.id:
                # Slots depend on the service duration; never carry them over.
                self._discard_slots()
                draft = replace(draft, service=service, time_slot=None)
            self._draft = draft
            self._step = WorkflowStep.date
            self._logger.info(
                "Service selected",
                extra={"workflow_id": self.id, "expert_id": self._expert.id, "service": service.id},
            )
            return WorkflowResult(action="ask_date", step=self._step)

    def select_date(self, day: date) -> WorkflowResult:
        with self._lock:
            self._require_step(WorkflowStep.date)
            if day < self._today():
                raise BookingValidationError("Cannot book a date in the past")

            draft = self._current_draft()
            slots = resolve_time_slots(
                self._expert.availability,
                day,
                service=draft.service,
                fallback_service=self._expert.default_service,
                tz=self._tz,
            )
            self._slots = slots
            self._slots_for = (day, draft.service.id)
            self._draft = replace(draft, date=day, time_slot=None)

            if not slots:
                self._logger.info(
                    "No slots for date",
                    extra={"workflow_id": self.id, "expert_id": self._expert.id, "date": day.isoformat()},
                )
                return WorkflowResult(action="no_slots", step=self._step, message=NO_SLOTS_MESSAGE, slots=[])
            return WorkflowResult(action="suggest_slots", step=self._step, slots=list(slots))

    def select_slot(self, slot_id: str) -> WorkflowResult:
        with self._lock:
            self._require_step(WorkflowStep.date)
            draft = self._current_draft()
            if draft.date is None or self._slots_for != (draft.date, draft.service.id):
                raise BookingValidationError("Select a date before choosing a time slot")

            slot = next((s for s in self._slots if s.id == slot_id), None)
            if slot is None:
                raise BookingValidationError(f"Time slot {slot_id} is not available for {draft.date.isoformat()}")

            self._draft = replace(draft, time_slot=slot)
            self._step = WorkflowStep.details
            return WorkflowResult(action="ask_details", step=self._step)

    def submit_details(
        self,
        participant_count: int,
        location: Location | str,
        notes: str = "",
    ) -> WorkflowResult:
        with self._lock:
            self._require_step(WorkflowStep.details)
            draft = self._current_draft()

            max_participants = draft.service.max_participants
            if not 1 <= participant_count <= max_participants:
                raise BookingValidationError(
                    f"Participant count must be between 1 and {max_participants}"
                )
            try:
                location = Location(location)
            except ValueError:
                raise BookingValidationError(f"Unsupported location: {location}")

            self._draft = replace(
                draft,
                participant_count=participant_count,
                location=location,
                notes=notes or "",
            )
            self._step = WorkflowStep.payment
            return WorkflowResult(action="ask_payment", step=self._step)

    def submit_payment(self) -> WorkflowResult:
        """
        Commit the draft as a booking request.

        On failure the workflow stays at payment with the draft untouched and
        the error is re-raised. There is no deduplication: submitting again
        sends a new create request.
        """
        with self._lock:
            self._require_step(WorkflowStep.payment)
            draft = self._current_draft()
            slot = draft.time_slot

            try:
                booking = self._api.create_booking(
                    expert_id=self._expert.id,
                    service_id=draft.service.id,
                    start_time=slot.start_time,
                    end_time=slot.end_time,
                    participants=draft.participant_count,
                    location=draft.location,
                    notes=draft.notes,
                )
            except BookingApiError as e:
                self._last_error = str(e) or BOOKING_FAILED_MESSAGE
                self._logger.error(
                    "Error creating booking",
                    extra={"workflow_id": self.id, "expert_id": self._expert.id, "error": str(e)},
                )
                raise

            self._booking = booking
            self._last_error = None
            self._draft = None
            self._discard_slots()
            self._step = WorkflowStep.confirmation
            self._logger.info(
                "Booking created",
                extra={"workflow_id": self.id, "booking_id": booking.id, "status": booking.status.value},
            )
            return WorkflowResult(action="booked", step=self._step, booking=booking)

    def back(self) -> WorkflowResult:
        with self._lock:
            self._require_open()
            previous = PREVIOUS_STEP.get(self._step)
            if previous is None:
                raise WorkflowTransitionError(f"Cannot go back from step '{self._step.value}'")
            self._step = previous
            return WorkflowResult(
                action="back",
                step=self._step,
                slots=list(self._slots) if self._step == WorkflowStep.date else None,
            )

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._draft = None
            self._discard_slots()

    def apply_event(self, event: BookingEvent) -> bool:
        """Apply a server-pushed update for the booking this workflow created."""
        with self._lock:
            if self._booking is None or event.booking_id != self._booking.id:
                return False

            if event.booking is not None:
                self._booking = event.booking
            elif event.kind == BOOKING_CANCELLED:
                self._booking = replace(self._booking, status=BookingStatus.cancelled)
            elif event.status:
                try:
                    self._booking = replace(self._booking, status=BookingStatus(event.status))
                except ValueError:
                    self._logger.warning(
                        "Ignoring unknown booking status",
                        extra={"workflow_id": self.id, "booking_id": event.booking_id, "status": event.status},
                    )
                    return False
            else:
                return False

            self._logger.info(
                "Booking status updated",
                extra={"workflow_id": self.id, "booking_id": self._booking.id, "status": self._booking.status.value},
            )
            return True

    def _require_open(self) -> None:
        if self._closed:
            raise WorkflowTransitionError("Booking workflow is closed")
        if self._step == WorkflowStep.confirmation:
            raise WorkflowTransitionError("Booking is already confirmed; start a new booking")

    def _require_step(self, step: WorkflowStep) -> None:
        self._require_open()
        if self._step != step:
            raise WorkflowTransitionError(
                f"Operation requires step '{step.value}', workflow is at '{self._step.value}'"
            )

    def _current_draft(self) -> BookingDraft:
        if self._draft is None:
            raise WorkflowTransitionError("Booking draft is no longer available")
        return self._draft

    def _discard_slots(self) -> None:
        self._slots = []
        self._slots_for = None


def _safe_timezone(name: str | None) -> ZoneInfo | None:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return None
