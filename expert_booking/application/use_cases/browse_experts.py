from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Callable

from expert_booking.application.ports.booking_api import BookingApiPort
from expert_booking.application.ports.event_bus import EventBusPort
from expert_booking.domain.entities.booking_event import EXPERT_STATUS, BookingEvent
from expert_booking.domain.entities.expert import EXPERT_STATUSES, Expert


@dataclass(frozen=True)
class AvailabilityResult:
    expert_id: str
    date: date
    available_slots: list[str]
    timezone: str
    duration: int
    stale: bool = False


class BrowseExpertsUseCase:
    def __init__(self, api: BookingApiPort) -> None:
        self._api = api
        self._latest_request: dict[str, int] = {}
        self._counter = 0
        # Presence pushed over expert:status overrides the fetched status.
        self._live_status: dict[str, str] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    @property
    def in_flight(self) -> int:
        """Experts with an availability request still awaiting its response."""
        with self._lock:
            return len(self._latest_request)

    def attach(self, bus: EventBusPort) -> Callable[[], None]:
        return bus.subscribe(EXPERT_STATUS, self.handle_status)

    def handle_status(self, event: BookingEvent) -> bool:
        if not event.expert_id or event.status not in EXPERT_STATUSES:
            self._logger.warning(
                "Ignoring expert status event",
                extra={"expert_id": event.expert_id, "status": event.status},
            )
            return False
        with self._lock:
            self._live_status[event.expert_id] = event.status
        self._logger.info("Expert status updated", extra={"expert_id": event.expert_id, "status": event.status})
        return True

    def list_experts(self, filters: dict[str, Any] | None = None) -> tuple[list[Expert], int]:
        clean = {k: v for k, v in (filters or {}).items() if v not in (None, "", [])}
        experts, total = self._api.list_experts(clean)
        return [self._with_live_status(e) for e in experts], total

    def get_expert(self, expert_id: str) -> Expert:
        return self._with_live_status(self._api.get_expert(expert_id))

    def get_availability(self, expert_id: str, day: date) -> AvailabilityResult:
        """
        Fetch remote availability for one expert and day.

        Last request wins: when a newer request for the same expert was issued
        while this one was in flight, the response is returned flagged stale
        and must not replace the newer data.
        """
        with self._lock:
            self._counter += 1
            request_id = self._counter
            self._latest_request[expert_id] = request_id

        try:
            slots, timezone, duration = self._api.get_availability(expert_id, day)
        finally:
            with self._lock:
                stale = self._latest_request.get(expert_id) != request_id
                if not stale:
                    del self._latest_request[expert_id]

        if stale:
            self._logger.info(
                "Discarding stale availability response",
                extra={"expert_id": expert_id, "date": day.isoformat()},
            )
        return AvailabilityResult(
            expert_id=expert_id,
            date=day,
            available_slots=slots,
            timezone=timezone,
            duration=duration,
            stale=stale,
        )

    def _with_live_status(self, expert: Expert) -> Expert:
        with self._lock:
            status = self._live_status.get(expert.id)
        if status is None or status == expert.status:
            return expert
        return replace(expert, status=status)
