from fastapi import APIRouter, Depends, Query

from expert_booking.api.errors import HANDLED_ERRORS, to_http_exception
from expert_booking.api.schemas import BookingListSchema, BookingSchema, RescheduleRequestSchema
from expert_booking.application.use_cases.manage_bookings import ManageBookingsUseCase
from expert_booking.wiring.dependencies import get_manage_bookings_use_case

router = APIRouter(prefix="/bookings")


@router.get("", response_model=BookingListSchema)
def list_bookings(
    status: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    uc: ManageBookingsUseCase = Depends(get_manage_bookings_use_case),
):
    try:
        bookings, total = uc.list_bookings(status=status, page=page, limit=limit)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e)
    return BookingListSchema(bookings=[BookingSchema.from_entity(b) for b in bookings], total=total)


@router.get("/{booking_id}", response_model=BookingSchema)
def get_booking(
    booking_id: str,
    uc: ManageBookingsUseCase = Depends(get_manage_bookings_use_case),
):
    try:
        booking = uc.get_booking(booking_id)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e)
    return BookingSchema.from_entity(booking)


@router.post("/{booking_id}/cancel", response_model=BookingSchema)
def cancel_booking(
    booking_id: str,
    uc: ManageBookingsUseCase = Depends(get_manage_bookings_use_case),
):
    try:
        booking = uc.cancel(booking_id)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e)
    return BookingSchema.from_entity(booking)


@router.post("/{booking_id}/reschedule", response_model=BookingSchema)
def reschedule_booking(
    booking_id: str,
    req: RescheduleRequestSchema,
    uc: ManageBookingsUseCase = Depends(get_manage_bookings_use_case),
):
    try:
        booking = uc.reschedule(booking_id, req.start_time, req.end_time)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e)
    return BookingSchema.from_entity(booking)
