from __future__ import annotations

from datetime import date, time, timedelta

import pytest

from expert_booking.application.exceptions import BookingApiError
from expert_booking.application.utils.availability import day_of_week
from expert_booking.domain.entities.availability import WeeklyAvailabilityRule
from expert_booking.domain.entities.expert import Expert
from expert_booking.domain.entities.service import Service
from expert_booking.infrastructure.api.mock_booking_api import MockBookingApi

TODAY = date(2030, 1, 1)


def next_date_for(weekday: int, start: date = TODAY) -> date:
    """First date on or after start whose Sunday-based weekday matches."""
    day = start
    while day_of_week(day) != weekday:
        day += timedelta(days=1)
    return day


class FlakyBookingApi(MockBookingApi):
    """MockBookingApi whose create_booking fails a configurable number of times."""

    def __init__(self, experts: dict[str, Expert], failures: int = 0) -> None:
        super().__init__(experts=experts)
        self.failures = failures
        self.create_calls: list[dict] = []

    def create_booking(self, **kwargs):
        self.create_calls.append(kwargs)
        if self.failures > 0:
            self.failures -= 1
            raise BookingApiError("Service unavailable", status_code=503)
        return super().create_booking(**kwargs)


@pytest.fixture
def consultation() -> Service:
    return Service(
        id="consult",
        name="Consultation",
        duration_minutes=60,
        price=120.0,
        currency="USD",
        max_participants=3,
    )


@pytest.fixture
def quick_call() -> Service:
    return Service(
        id="quick",
        name="Quick Call",
        duration_minutes=30,
        price=50.0,
        currency="EUR",
        max_participants=1,
    )


@pytest.fixture
def expert(consultation: Service, quick_call: Service) -> Expert:
    return Expert(
        id="exp-1",
        name="Ada Expert",
        timezone="UTC",
        availability=(
            WeeklyAvailabilityRule(day_of_week=0, start_time=time(9), end_time=time(17), is_available=False),
            WeeklyAvailabilityRule(day_of_week=1, start_time=time(9), end_time=time(17), buffer_minutes=15),
            WeeklyAvailabilityRule(day_of_week=2, start_time=time(9), end_time=time(10)),
        ),
        services=(consultation, quick_call),
    )


@pytest.fixture
def api(expert: Expert) -> FlakyBookingApi:
    return FlakyBookingApi(experts={expert.id: expert})


@pytest.fixture
def monday() -> date:
    return next_date_for(1)


@pytest.fixture
def tuesday() -> date:
    return next_date_for(2)


@pytest.fixture
def sunday() -> date:
    return next_date_for(0)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def wednesday() -> date:
    return next_date_for(3)
