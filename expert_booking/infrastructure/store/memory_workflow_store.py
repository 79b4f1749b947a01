from __future__ import annotations

import logging
import threading
from collections import OrderedDict

from expert_booking.application.exceptions import WorkflowNotFoundError
from expert_booking.application.ports.workflow_store import WorkflowStorePort
from expert_booking.application.use_cases.booking_workflow import BookingWorkflow


class MemoryWorkflowStore(WorkflowStorePort):
    def __init__(self, max_workflows: int = 1000) -> None:
        self._workflows: OrderedDict[str, BookingWorkflow] = OrderedDict()
        self._max_workflows = max_workflows
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def add(self, workflow: BookingWorkflow) -> None:
        with self._lock:
            self._workflows[workflow.id] = workflow
            while len(self._workflows) > self._max_workflows:
                evicted_id, evicted = self._workflows.popitem(last=False)
                evicted.close()
                self._logger.info("Evicted oldest booking workflow", extra={"workflow_id": evicted_id})

    def get(self, workflow_id: str) -> BookingWorkflow:
        with self._lock:
            workflow = self._workflows.get(workflow_id)
        if workflow is None:
            raise WorkflowNotFoundError(f"Booking workflow {workflow_id} not found")
        return workflow

    def remove(self, workflow_id: str) -> bool:
        with self._lock:
            return self._workflows.pop(workflow_id, None) is not None

    def find_by_booking(self, booking_id: str) -> list[BookingWorkflow]:
        with self._lock:
            workflows = list(self._workflows.values())
        return [w for w in workflows if w.booking is not None and w.booking.id == booking_id]
