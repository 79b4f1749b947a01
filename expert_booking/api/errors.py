from fastapi import HTTPException

from expert_booking.application.exceptions import (
    AuthenticationError,
    BookingApiError,
    BookingValidationError,
    WorkflowNotFoundError,
    WorkflowTransitionError,
)


def to_http_exception(error: Exception) -> HTTPException:
    if isinstance(error, BookingValidationError):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, WorkflowNotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, WorkflowTransitionError):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, AuthenticationError):
        return HTTPException(status_code=401, detail=str(error))
    if isinstance(error, BookingApiError):
        if error.status_code in (400, 404):
            return HTTPException(status_code=error.status_code, detail=str(error))
        return HTTPException(status_code=502, detail=str(error))
    return HTTPException(status_code=500, detail="Internal error")


HANDLED_ERRORS = (
    BookingValidationError,
    WorkflowNotFoundError,
    WorkflowTransitionError,
    BookingApiError,
)
