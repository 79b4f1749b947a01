from __future__ import annotations

from datetime import time

from expert_booking.domain.entities.availability import WeeklyAvailabilityRule
from expert_booking.domain.entities.expert import Expert
from expert_booking.domain.entities.service import Service


def _weekdays(start: time, end: time, buffer_minutes: int) -> tuple[WeeklyAvailabilityRule, ...]:
    rules = [WeeklyAvailabilityRule(day_of_week=0, start_time=start, end_time=end, is_available=False)]
    rules += [
        WeeklyAvailabilityRule(day_of_week=day, start_time=start, end_time=end, buffer_minutes=buffer_minutes)
        for day in range(1, 6)
    ]
    rules.append(WeeklyAvailabilityRule(day_of_week=6, start_time=start, end_time=end, is_available=False))
    return tuple(rules)


MOCK_EXPERTS: dict[str, Expert] = {
    "1": Expert(
        id="1",
        name="Sarah Chen",
        title="Product Strategy Consultant",
        timezone="America/New_York",
        hourly_rate=150,
        status="available",
        availability=_weekdays(time(9, 0), time(17, 0), buffer_minutes=15),
        services=(
            Service(
                id="strategy-call",
                name="Strategy Call",
                duration_minutes=60,
                price=150,
                currency="USD",
                max_participants=3,
                category="business",
            ),
            Service(
                id="quick-review",
                name="Quick Review",
                duration_minutes=30,
                price=80,
                currency="USD",
                max_participants=1,
                category="business",
            ),
        ),
    ),
    "2": Expert(
        id="2",
        name="Marcus Webb",
        title="Senior Backend Engineer",
        timezone="Europe/London",
        hourly_rate=120,
        status="busy",
        availability=_weekdays(time(10, 0), time(16, 0), buffer_minutes=0),
        services=(
            Service(
                id="code-review",
                name="Code Review Session",
                duration_minutes=45,
                price=110,
                currency="GBP",
                max_participants=2,
                category="engineering",
            ),
        ),
    ),
}

MOCK_USER_EMAIL = "test@example.com"
MOCK_USER_PASSWORD = "password"
MOCK_TOKEN = "mock-jwt-token"
MOCK_REFRESH_TOKEN = "mock-refresh-token"
