from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from expert_booking.application.ports.booking_api import BookingApiPort
from expert_booking.application.ports.workflow_store import WorkflowStorePort
from expert_booking.application.use_cases.booking_workflow import BookingWorkflow


class WorkflowService:
    """Opens, looks up and closes booking workflows."""

    def __init__(
        self,
        api: BookingApiPort,
        store: WorkflowStorePort,
        default_timezone: str | None = None,
        today: Callable[[], date] | None = None,
    ) -> None:
        self._api = api
        self._store = store
        self._default_timezone = default_timezone
        self._today = today
        self._logger = logging.getLogger(__name__)

    def start(self, expert_id: str) -> BookingWorkflow:
        expert = self._api.get_expert(expert_id)
        workflow = BookingWorkflow(
            expert=expert,
            api=self._api,
            timezone=self._default_timezone,
            today=self._today,
        )
        self._store.add(workflow)
        self._logger.info("Booking workflow started", extra={"workflow_id": workflow.id, "expert_id": expert.id})
        return workflow

    def get(self, workflow_id: str) -> BookingWorkflow:
        return self._store.get(workflow_id)

    def close(self, workflow_id: str) -> None:
        workflow = self._store.get(workflow_id)
        workflow.close()
        self._store.remove(workflow_id)
        self._logger.info("Booking workflow closed", extra={"workflow_id": workflow_id})
