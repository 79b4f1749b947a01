from enum import Enum


class WorkflowStep(str, Enum):
    service = "service"
    date = "date"
    details = "details"
    payment = "payment"
    confirmation = "confirmation"


PREVIOUS_STEP: dict[WorkflowStep, WorkflowStep] = {
    WorkflowStep.date: WorkflowStep.service,
    WorkflowStep.details: WorkflowStep.date,
    WorkflowStep.payment: WorkflowStep.details,
}
