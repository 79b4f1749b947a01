import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from expert_booking.api.schemas import EventAckSchema
from expert_booking.application.dto.booking_event import BookingEventDTO
from expert_booking.application.ports.event_bus import EventBusPort
from expert_booking.wiring.dependencies import get_event_bus

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/events", response_model=EventAckSchema)
def push_event(
    req: BookingEventDTO,
    bus: EventBusPort = Depends(get_event_bus),
):
    try:
        event = req.to_event()
    except ValidationError as e:
        logger.warning("Rejected malformed booking event", extra={"event": req.event, "error": str(e)})
        raise HTTPException(status_code=400, detail="Malformed event payload")

    delivered = bus.publish(event)
    logger.info("Booking event received", extra={"event": event.kind, "booking_id": event.booking_id})
    return EventAckSchema(event=event.kind, delivered=delivered)
