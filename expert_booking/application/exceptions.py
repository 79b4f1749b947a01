class BookingValidationError(ValueError):
    """Raised when a workflow transition guard rejects the user's input."""
    pass


class WorkflowTransitionError(RuntimeError):
    """Raised when an operation is not allowed in the workflow's current step."""
    pass


class WorkflowNotFoundError(LookupError):
    pass


class BookingApiError(RuntimeError):
    """Raised when the marketplace API fails (network errors, 4xx/5xx responses)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(BookingApiError):
    """Raised when the session cannot be authenticated or refreshed."""
    pass


class MalformedResponseError(BookingApiError):
    """Raised when the API returns data that does not match the expected shape."""
    pass
