"""Pydantic schemas shared by the bridge client and the companion service"""
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from typing import Optional, List, Any, Union
from enum import Enum


MIN_PORT = 1024
MAX_PORT = 65535


# ============ Service Location ============

class ServiceLocation(BaseModel):
    """Where the companion service listens. Immutable; replace to update."""
    model_config = ConfigDict(frozen=True)

    port: int
    host: str = "localhost"

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


class PortUpdateRequest(BaseModel):
    """Body of POST /bridge/v1/port; range checked by BridgeClient.update_port"""
    port: Any = None


# ============ Event Models ============

class EventKind(str, Enum):
    """Events the CMS pushes to the companion"""
    POST_PUBLISHED = "post_published"
    USER_REGISTERED = "user_registered"
    ORDER_COMPLETED = "order_completed"


class EventEnvelope(BaseModel):
    """Wire format of a webhook event: {event, data}"""
    event: Any = Field(..., description="Event type; any value, compared as a string")
    data: Any = None

    @property
    def name(self) -> str:
        return self.event if isinstance(self.event, str) else str(self.event)


class _Payload(BaseModel):
    model_config = ConfigDict(extra="allow")


class PostPublishedData(_Payload):
    id: Optional[int] = None
    title: Optional[str] = None
    slug: Optional[str] = None
    author: Optional[Any] = None
    date: Optional[str] = None


class UserRegisteredData(_Payload):
    id: Optional[int] = None
    email: Optional[str] = None
    username: Optional[str] = None
    display_name: Optional[str] = None


class OrderItem(_Payload):
    name: Optional[str] = None
    quantity: Optional[int] = None
    total: Optional[Any] = None


class OrderCompletedData(_Payload):
    order_id: Optional[int] = None
    total: Optional[Any] = None
    customer_email: Optional[str] = None
    items: List[OrderItem] = Field(default_factory=list)


EVENT_PAYLOADS = {
    EventKind.POST_PUBLISHED: PostPublishedData,
    EventKind.USER_REGISTERED: UserRegisteredData,
    EventKind.ORDER_COMPLETED: OrderCompletedData,
}


class KnownEvent(BaseModel):
    kind: EventKind
    payload: Union[PostPublishedData, UserRegisteredData, OrderCompletedData]

    @property
    def name(self) -> str:
        return self.kind.value


class UnknownEvent(BaseModel):
    """Fallback for event types outside EventKind; accepted, not rejected"""
    name: str
    data: Any = None


def parse_event(envelope: EventEnvelope) -> Union[KnownEvent, UnknownEvent]:
    """Map an envelope onto its tagged variant."""
    try:
        kind = EventKind(envelope.name)
    except ValueError:
        return UnknownEvent(name=envelope.name, data=envelope.data)
    data = envelope.data if isinstance(envelope.data, dict) else {}
    model = EVENT_PAYLOADS[kind]
    try:
        payload = model.model_validate(data)
    except ValidationError:
        # Keep the event; the payload is informational only
        payload = model.model_construct(**data)
    return KnownEvent(kind=kind, payload=payload)


def build_envelope(kind: EventKind, payload: _Payload) -> EventEnvelope:
    return EventEnvelope(event=kind.value, data=payload.model_dump())


class WebhookReceipt(BaseModel):
    received: bool = True
    event: str


# ============ Status Models ============

class StatusResult(BaseModel):
    """Result of a companion health check"""
    status: str  # connected | error
    port: int
    response: Optional[Any] = None
    message: Optional[str] = None
    error: Optional[str] = None


class AdminNotice(BaseModel):
    level: str = "warning"
    dismissible: bool = True
    message: str
