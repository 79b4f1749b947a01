"""
Tests for the booking workflow state machine.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import time, timedelta

import pytest

from expert_booking.application.exceptions import (
    BookingApiError,
    BookingValidationError,
    WorkflowTransitionError,
)
from expert_booking.application.use_cases.booking_workflow import NO_SLOTS_MESSAGE, BookingWorkflow
from expert_booking.domain.entities.booking import BookingStatus, Location
from expert_booking.domain.entities.booking_draft import BookingDraft
from expert_booking.domain.entities.booking_event import BOOKING_CANCELLED, BOOKING_UPDATED, BookingEvent
from expert_booking.domain.entities.workflow_step import WorkflowStep


@pytest.fixture
def workflow(expert, api, today) -> BookingWorkflow:
    return BookingWorkflow(expert=expert, api=api, today=lambda: today)


def _to_payment(workflow: BookingWorkflow, day, service_id: str = "consult") -> None:
    workflow.select_service(service_id)
    result = workflow.select_date(day)
    workflow.select_slot(result.slots[0].id)
    workflow.submit_details(participant_count=2, location="in-person", notes="Bring the roadmap")


def test_starts_at_service_step(workflow):
    assert workflow.step == WorkflowStep.service
    assert workflow.draft == BookingDraft()
    assert workflow.slots == []


def test_happy_path_reaches_confirmation(workflow, api, monday):
    workflow.select_service("consult")
    assert workflow.step == WorkflowStep.date

    result = workflow.select_date(monday)
    assert result.action == "suggest_slots"
    assert len(result.slots) == 6

    workflow.select_slot(result.slots[2].id)
    assert workflow.step == WorkflowStep.details
    assert workflow.draft.time_slot.start_time.time() == time(11, 30)

    workflow.submit_details(participant_count=3, location=Location.online, notes="")
    assert workflow.step == WorkflowStep.payment

    result = workflow.submit_payment()
    assert result.action == "booked"
    assert workflow.step == WorkflowStep.confirmation
    assert workflow.booking.status == BookingStatus.pending
    assert workflow.booking.participants == 3
    assert len(api.create_calls) == 1
    assert api.create_calls[0]["service_id"] == "consult"


def test_service_selection_requires_known_service(workflow):
    with pytest.raises(BookingValidationError):
        workflow.select_service("missing")
    assert workflow.step == WorkflowStep.service


def test_zero_duration_service_is_rejected_before_resolving(expert, api, today, consultation):
    broken = replace(expert, services=(replace(consultation, duration_minutes=0),))
    workflow = BookingWorkflow(expert=broken, api=api, today=lambda: today)

    with pytest.raises(BookingValidationError):
        workflow.select_service("consult")
    assert workflow.step == WorkflowStep.service


def test_date_without_slots_stays_on_date_step(workflow, sunday):
    workflow.select_service("consult")
    result = workflow.select_date(sunday)

    assert result.action == "no_slots"
    assert result.message == NO_SLOTS_MESSAGE
    assert workflow.step == WorkflowStep.date
    assert workflow.slots == []


def test_slot_required_to_leave_date_step(workflow, monday):
    workflow.select_service("consult")
    with pytest.raises(BookingValidationError):
        workflow.select_slot(f"{monday.isoformat()}-09-00")

    workflow.select_date(monday)
    with pytest.raises(BookingValidationError):
        workflow.select_slot("not-a-slot")
    assert workflow.step == WorkflowStep.date


def test_past_dates_are_rejected(workflow, today):
    workflow.select_service("consult")
    with pytest.raises(BookingValidationError):
        workflow.select_date(today - timedelta(days=1))


def test_changing_date_discards_previous_slots(workflow, monday, tuesday):
    workflow.select_service("consult")
    monday_slots = workflow.select_date(monday).slots
    workflow.select_date(tuesday)

    with pytest.raises(BookingValidationError):
        workflow.select_slot(monday_slots[0].id)
    assert all(s.start_time.date() == tuesday for s in workflow.slots)


def test_reselecting_service_discards_stale_slots(workflow, monday):
    """Going back to service and picking another one must not reuse slots sized for the first."""
    workflow.select_service("consult")
    workflow.select_date(monday)
    assert len(workflow.slots) == 6

    workflow.back()
    assert workflow.step == WorkflowStep.service
    workflow.select_service("quick")

    assert workflow.slots == []
    assert workflow.draft.time_slot is None
    assert workflow.draft.service.id == "quick"

    result = workflow.select_date(monday)
    assert {s.duration_minutes for s in result.slots} == {30}
    assert {s.price for s in result.slots} == {50.0}


def test_details_validate_participants_and_location(workflow, monday):
    workflow.select_service("consult")
    workflow.select_slot(workflow.select_date(monday).slots[0].id)

    with pytest.raises(BookingValidationError):
        workflow.submit_details(participant_count=0, location="online")
    with pytest.raises(BookingValidationError):
        workflow.submit_details(participant_count=4, location="online")
    with pytest.raises(BookingValidationError):
        workflow.submit_details(participant_count=1, location="on-the-moon")
    assert workflow.step == WorkflowStep.details

    workflow.submit_details(participant_count=3, location="in-person")
    assert workflow.draft.location == Location.in_person


def test_failed_booking_keeps_draft_and_payment_step(workflow, api, monday):
    _to_payment(workflow, monday)
    draft_before = workflow.draft
    api.failures = 1

    with pytest.raises(BookingApiError):
        workflow.submit_payment()

    assert workflow.step == WorkflowStep.payment
    assert workflow.draft == draft_before
    assert workflow.last_error == "Service unavailable"
    assert workflow.booking is None

    result = workflow.submit_payment()
    assert result.step == WorkflowStep.confirmation
    assert workflow.last_error is None
    assert workflow.draft is None


def test_retry_after_failure_sends_identical_request(workflow, api, monday):
    """No idempotency key: a retry is a brand new create request with the same payload."""
    _to_payment(workflow, monday)
    api.failures = 1

    with pytest.raises(BookingApiError):
        workflow.submit_payment()
    workflow.submit_payment()

    assert len(api.create_calls) == 2
    assert api.create_calls[0] == api.create_calls[1]


def test_same_draft_submitted_twice_creates_two_bookings(expert, api, today, monday):
    """Current behaviour: nothing deduplicates identical submissions."""
    first = BookingWorkflow(expert=expert, api=api, today=lambda: today)
    second = BookingWorkflow(expert=expert, api=api, today=lambda: today)
    _to_payment(first, monday)
    _to_payment(second, monday)

    booking_a = first.submit_payment().booking
    booking_b = second.submit_payment().booking

    assert booking_a.id != booking_b.id
    assert booking_a.start_time == booking_b.start_time
    bookings, total = api.list_bookings()
    assert total == 2


def test_confirmation_is_terminal(workflow, monday):
    _to_payment(workflow, monday)
    workflow.submit_payment()

    with pytest.raises(WorkflowTransitionError):
        workflow.back()
    with pytest.raises(WorkflowTransitionError):
        workflow.submit_payment()
    with pytest.raises(WorkflowTransitionError):
        workflow.select_service("consult")


def test_back_navigation(workflow, monday):
    with pytest.raises(WorkflowTransitionError):
        workflow.back()

    _to_payment(workflow, monday)
    assert workflow.back().step == WorkflowStep.details
    result = workflow.back()
    assert result.step == WorkflowStep.date
    assert result.slots
    assert workflow.back().step == WorkflowStep.service


def test_operations_require_their_step(workflow, monday):
    with pytest.raises(WorkflowTransitionError):
        workflow.select_date(monday)
    with pytest.raises(WorkflowTransitionError):
        workflow.submit_payment()


def test_closed_workflow_is_unusable(workflow, monday):
    workflow.select_service("consult")
    workflow.close()

    assert workflow.is_closed
    assert workflow.draft is None
    with pytest.raises(WorkflowTransitionError):
        workflow.select_date(monday)


def test_server_events_update_confirmed_booking(workflow, monday):
    _to_payment(workflow, monday)
    booking = workflow.submit_payment().booking

    assert workflow.apply_event(BookingEvent(kind=BOOKING_UPDATED, booking_id=booking.id, status="confirmed"))
    assert workflow.booking.status == BookingStatus.confirmed

    assert not workflow.apply_event(BookingEvent(kind=BOOKING_CANCELLED, booking_id="other"))
    assert workflow.apply_event(BookingEvent(kind=BOOKING_CANCELLED, booking_id=booking.id))
    assert workflow.booking.status == BookingStatus.cancelled


def test_unknown_event_status_is_ignored(workflow, monday):
    _to_payment(workflow, monday)
    booking = workflow.submit_payment().booking

    assert not workflow.apply_event(BookingEvent(kind=BOOKING_UPDATED, booking_id=booking.id, status="exploded"))
    assert workflow.booking.status == BookingStatus.pending
