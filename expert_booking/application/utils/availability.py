from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable

from expert_booking.domain.entities.availability import WeeklyAvailabilityRule
from expert_booking.domain.entities.service import Service
from expert_booking.domain.entities.time_slot import TimeSlot

DEFAULT_DURATION_MINUTES = 60


def day_of_week(day: date) -> int:
    """Weekday index with Sunday = 0, as the availability rules use it."""
    return (day.weekday() + 1) % 7


def find_rule(rules: Iterable[WeeklyAvailabilityRule], day: date) -> WeeklyAvailabilityRule | None:
    # First match wins when an expert has several rules for the same weekday.
    weekday = day_of_week(day)
    for rule in rules:
        if rule.day_of_week == weekday:
            return rule
    return None


def slot_id(start: datetime) -> str:
    return start.strftime("%Y-%m-%d-%H-%M")


def resolve_time_slots(
    rules: Iterable[WeeklyAvailabilityRule],
    target_date: date,
    service: Service | None = None,
    fallback_service: Service | None = None,
    tz: tzinfo | None = None,
) -> list[TimeSlot]:
    """
    Compute the bookable slots of an expert for one date.

    Slots of the service duration are laid out from the start of the weekday
    window, separated by the rule's buffer. A slot that would end after the
    window is dropped. Unavailable or missing weekdays yield an empty list.
    """
    rule = find_rule(rules, target_date)
    if rule is None or not rule.is_available:
        return []

    priced_by = service or fallback_service
    duration = priced_by.duration_minutes if priced_by else DEFAULT_DURATION_MINUTES
    if duration <= 0:
        raise ValueError("Service duration must be positive")

    window_start = datetime.combine(target_date, rule.start_time, tzinfo=tz)
    window_end = datetime.combine(target_date, rule.end_time, tzinfo=tz)
    length = timedelta(minutes=duration)
    step = timedelta(minutes=duration + rule.buffer_minutes)

    slots: list[TimeSlot] = []
    cursor = window_start
    while cursor + length <= window_end:
        slots.append(
            TimeSlot(
                id=slot_id(cursor),
                start_time=cursor,
                end_time=cursor + length,
                duration_minutes=duration,
                available=True,
                price=priced_by.price if priced_by else 0.0,
                currency=priced_by.currency if priced_by else "USD",
                buffer_before=rule.buffer_minutes,
                buffer_after=rule.buffer_minutes,
            )
        )
        cursor += step

    return slots
