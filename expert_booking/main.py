import logging

from fastapi import FastAPI

from expert_booking.api.auth import router as auth_router
from expert_booking.api.bookings import router as bookings_router
from expert_booking.api.events import router as events_router
from expert_booking.api.experts import router as experts_router
from expert_booking.api.workflows import router as workflows_router
from expert_booking.core.config import settings

CONTEXT_KEYS = (
    "workflow_id",
    "expert_id",
    "booking_id",
    "service",
    "date",
    "user_id",
    "event",
    "status",
    "method",
    "path",
    "error",
)


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="Expert Booking", version="1.0.0")

app.include_router(auth_router, tags=["auth"])
app.include_router(experts_router, tags=["experts"])
app.include_router(workflows_router, tags=["workflows"])
app.include_router(bookings_router, tags=["bookings"])
app.include_router(events_router, tags=["events"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
