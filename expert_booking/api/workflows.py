from fastapi import APIRouter, Depends

from expert_booking.api.errors import HANDLED_ERRORS, to_http_exception
from expert_booking.api.schemas import (
    DetailsRequestSchema,
    SelectDateRequestSchema,
    SelectServiceRequestSchema,
    SelectSlotRequestSchema,
    StartWorkflowRequestSchema,
    WorkflowSchema,
)
from expert_booking.application.use_cases.workflows import WorkflowService
from expert_booking.wiring.dependencies import get_workflow_service

router = APIRouter(prefix="/workflows")


@router.post("", response_model=WorkflowSchema, status_code=201)
def start_workflow(
    req: StartWorkflowRequestSchema,
    service: WorkflowService = Depends(get_workflow_service),
):
    try:
        workflow = service.start(req.expert_id)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e)
    return WorkflowSchema.from_workflow(workflow, action="ask_service")


@router.get("/{workflow_id}", response_model=WorkflowSchema)
def get_workflow(
    workflow_id: str,
    service: WorkflowService = Depends(get_workflow_service),
):
    try:
        workflow = service.get(workflow_id)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e)
    return WorkflowSchema.from_workflow(workflow)


@router.post("/{workflow_id}/service", response_model=WorkflowSchema)
def select_service(
    workflow_id: str,
    req: SelectServiceRequestSchema,
    service: WorkflowService = Depends(get_workflow_service),
):
    try:
        workflow = service.get(workflow_id)
        result = workflow.select_service(req.service_id)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e)
    return WorkflowSchema.from_workflow(workflow, action=result.action, message=result.message)


@router.post("/{workflow_id}/date", response_model=WorkflowSchema)
def select_date(
    workflow_id: str,
    req: SelectDateRequestSchema,
    service: WorkflowService = Depends(get_workflow_service),
):
    try:
        workflow = service.get(workflow_id)
        result = workflow.select_date(req.date)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e)
    return WorkflowSchema.from_workflow(workflow, action=result.action, message=result.message)


@router.post("/{workflow_id}/slot", response_model=WorkflowSchema)
def select_slot(
    workflow_id: str,
    req: SelectSlotRequestSchema,
    service: WorkflowService = Depends(get_workflow_service),
):
    try:
        workflow = service.get(workflow_id)
        result = workflow.select_slot(req.slot_id)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e)
    return WorkflowSchema.from_workflow(workflow, action=result.action, message=result.message)


@router.post("/{workflow_id}/details", response_model=WorkflowSchema)
def submit_details(
    workflow_id: str,
    req: DetailsRequestSchema,
    service: WorkflowService = Depends(get_workflow_service),
):
    try:
        workflow = service.get(workflow_id)
        result = workflow.submit_details(req.participant_count, req.location, req.notes)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e)
    return WorkflowSchema.from_workflow(workflow, action=result.action, message=result.message)


@router.post("/{workflow_id}/payment", response_model=WorkflowSchema)
def submit_payment(
    workflow_id: str,
    service: WorkflowService = Depends(get_workflow_service),
):
    try:
        workflow = service.get(workflow_id)
        result = workflow.submit_payment()
    except HANDLED_ERRORS as e:
        raise to_http_exception(e)
    return WorkflowSchema.from_workflow(workflow, action=result.action, message=result.message)


@router.post("/{workflow_id}/back", response_model=WorkflowSchema)
def go_back(
    workflow_id: str,
    service: WorkflowService = Depends(get_workflow_service),
):
    try:
        workflow = service.get(workflow_id)
        result = workflow.back()
    except HANDLED_ERRORS as e:
        raise to_http_exception(e)
    return WorkflowSchema.from_workflow(workflow, action=result.action, message=result.message)


@router.delete("/{workflow_id}", status_code=204)
def close_workflow(
    workflow_id: str,
    service: WorkflowService = Depends(get_workflow_service),
) -> None:
    try:
        service.close(workflow_id)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e)
