from datetime import date

from fastapi import APIRouter, Depends, Query

from expert_booking.api.errors import HANDLED_ERRORS, to_http_exception
from expert_booking.api.schemas import AvailabilitySchema, ExpertListSchema, ExpertSchema
from expert_booking.application.use_cases.browse_experts import BrowseExpertsUseCase
from expert_booking.wiring.dependencies import get_browse_experts_use_case

router = APIRouter(prefix="/experts")


@router.get("", response_model=ExpertListSchema)
def list_experts(
    category: str | None = None,
    search: str | None = None,
    sort_by: str | None = Query(None, alias="sortBy"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    uc: BrowseExpertsUseCase = Depends(get_browse_experts_use_case),
):
    filters = {"category": category, "search": search, "sortBy": sort_by, "page": page, "limit": limit}
    try:
        experts, total = uc.list_experts(filters)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e)
    return ExpertListSchema(experts=[ExpertSchema.from_entity(e) for e in experts], total=total)


@router.get("/{expert_id}", response_model=ExpertSchema)
def get_expert(
    expert_id: str,
    uc: BrowseExpertsUseCase = Depends(get_browse_experts_use_case),
):
    try:
        expert = uc.get_expert(expert_id)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e)
    return ExpertSchema.from_entity(expert)


@router.get("/{expert_id}/availability", response_model=AvailabilitySchema)
def get_availability(
    expert_id: str,
    day: date = Query(..., alias="date"),
    uc: BrowseExpertsUseCase = Depends(get_browse_experts_use_case),
):
    try:
        result = uc.get_availability(expert_id, day)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e)
    return AvailabilitySchema(
        expert_id=result.expert_id,
        date=result.date,
        available_slots=result.available_slots,
        timezone=result.timezone,
        duration=result.duration,
        stale=result.stale,
    )
