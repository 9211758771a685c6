"""Webhook endpoint for events pushed by WordPress"""
from datetime import datetime

from fastapi import APIRouter

from ...models.schemas import (
    EventEnvelope,
    EventKind,
    UnknownEvent,
    parse_event,
)
from ...utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Webhooks"])


def handle_event(event) -> None:
    """Per-kind side effects; currently logging only"""
    if isinstance(event, UnknownEvent):
        logger.info("Unknown event: %s", event.name)
        return

    if event.kind is EventKind.POST_PUBLISHED:
        logger.info("New post published: %s", event.payload.title)
    elif event.kind is EventKind.USER_REGISTERED:
        logger.info("New user registered: %s", event.payload.email)
    elif event.kind is EventKind.ORDER_COMPLETED:
        logger.info("Order completed: %s", event.payload.order_id)


@router.post("/webhook")
async def receive_webhook(envelope: EventEnvelope):
    """
    Receive an event envelope from WordPress.

    Unrecognised event types are acknowledged, not rejected.
    """
    logger.info("Received %s from WordPress: %s", envelope.name, envelope.data)
    event = parse_event(envelope)
    handle_event(event)

    return {
        "received": True,
        "event": envelope.name,
        "timestamp": datetime.utcnow().isoformat(),
    }
