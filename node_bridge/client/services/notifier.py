"""
Event notifier: turns CMS lifecycle events into webhook envelopes for the
companion service. Delivery is best-effort and never raises.
"""

from typing import Any, Callable, Mapping, Optional

from .forwarder import ForwardResult, ProxyForwarder
from ...models.schemas import (
    EventKind,
    OrderCompletedData,
    OrderItem,
    PostPublishedData,
    UserRegisteredData,
    build_envelope,
)
from ...utils.logging_config import get_logger

logger = get_logger(__name__)

WEBHOOK_ENDPOINT = "webhook"


def _field(obj: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a mapping or an attribute-style object."""
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


class EventNotifier:
    """Pushes post/user/order events to the companion's /webhook"""

    def __init__(
        self,
        forwarder: ProxyForwarder,
        order_lookup: Optional[Callable[[int], Any]] = None,
        user_lookup: Optional[Callable[[int], Any]] = None,
    ):
        self.forwarder = forwarder
        self.order_lookup = order_lookup
        self.user_lookup = user_lookup

    async def send(self, kind: EventKind, payload) -> ForwardResult:
        envelope = build_envelope(kind, payload)
        try:
            result = await self.forwarder.forward(
                "POST", WEBHOOK_ENDPOINT, envelope.model_dump()
            )
        except Exception as e:
            logger.warning("Failed to notify node service of %s: %s", kind.value, e)
            return ForwardResult(success=False, error=str(e))

        if not result.success:
            logger.warning("Failed to notify node service of %s: %s", kind.value, result.error)
        return result

    async def post_published(self, post_id: int, post: Any) -> ForwardResult:
        payload = PostPublishedData(
            id=post_id,
            title=_field(post, "post_title", _field(post, "title")),
            slug=_field(post, "post_name", _field(post, "slug")),
            author=_field(post, "post_author", _field(post, "author")),
            date=_stringify(_field(post, "post_date", _field(post, "date"))),
        )
        return await self.send(EventKind.POST_PUBLISHED, payload)

    async def user_registered(self, user_id: int, user: Any = None) -> ForwardResult:
        if user is None and self.user_lookup is not None:
            try:
                user = self.user_lookup(user_id)
            except Exception as e:
                logger.warning("User lookup for %s failed: %s", user_id, e)
        user = user or {}
        payload = UserRegisteredData(
            id=user_id,
            email=_field(user, "user_email", _field(user, "email")),
            username=_field(user, "user_login", _field(user, "username")),
            display_name=_field(user, "display_name"),
        )
        return await self.send(EventKind.USER_REGISTERED, payload)

    async def order_completed(self, order_id: int, order: Any = None) -> Optional[ForwardResult]:
        """Skipped (returns None) when there is neither an order nor a lookup."""
        if order is None:
            if self.order_lookup is None:
                return None
            try:
                order = self.order_lookup(order_id)
            except Exception as e:
                logger.warning("Order lookup for %s failed: %s", order_id, e)
                return None
            if order is None:
                return None

        items = [
            OrderItem(
                name=_field(item, "name"),
                quantity=_field(item, "quantity"),
                total=_field(item, "total"),
            )
            for item in (_field(order, "items") or [])
        ]
        payload = OrderCompletedData(
            order_id=order_id,
            total=_field(order, "total"),
            customer_email=_field(order, "billing_email", _field(order, "customer_email")),
            items=items,
        )
        return await self.send(EventKind.ORDER_COMPLETED, payload)


def _stringify(value: Any) -> Optional[str]:
    if value is None:
        return None
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)
