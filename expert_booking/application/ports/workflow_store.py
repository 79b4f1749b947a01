from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from expert_booking.application.use_cases.booking_workflow import BookingWorkflow


class WorkflowStorePort(ABC):
    @abstractmethod
    def add(self, workflow: "BookingWorkflow") -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, workflow_id: str) -> "BookingWorkflow":
        """Raises WorkflowNotFoundError if missing."""
        raise NotImplementedError

    @abstractmethod
    def remove(self, workflow_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def find_by_booking(self, booking_id: str) -> list["BookingWorkflow"]:
        raise NotImplementedError
