"""
BridgeClient: the CMS-side bridge to the companion Node service.

One instance per process, constructed at startup and handed to whatever
needs it (the FastAPI app keeps it on ``app.state.bridge``, the CLI builds
its own). It owns the resolved service location and the collaborators that
talk to the service.
"""

import threading
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import httpx

from .hooks import ActionHooks
from .services.forwarder import ForwardResult, ProxyForwarder
from .services.locator import PORT_OPTION, PortResolution, resolve_port
from .services.notifier import EventNotifier
from .services.status import StatusMonitor
from .services.storage import OptionStore, TransientCache
from ..exceptions import InvalidPort
from ..models.schemas import MAX_PORT, MIN_PORT, ServiceLocation, StatusResult
from ..utils.config import BridgeSettings
from ..utils.logging_config import get_logger

logger = get_logger(__name__)

# Hook names the bridge reacts to / fires
PUBLISH_POST = "publish_post"
USER_REGISTER = "user_register"
ORDER_COMPLETED = "woocommerce_order_status_completed"
NODE_SERVICE_WEBHOOK = "node_service_webhook"


class BridgeClient:
    """Resolves, calls and monitors the companion service"""

    def __init__(
        self,
        settings: Optional[BridgeSettings] = None,
        options: Optional[OptionStore] = None,
        hooks: Optional[ActionHooks] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        order_lookup: Optional[Callable[[int], Any]] = None,
        user_lookup: Optional[Callable[[int], Any]] = None,
    ):
        self.settings = settings or BridgeSettings()
        self.options = options or OptionStore(Path(self.settings.OPTIONS_FILE))
        self.hooks = hooks or ActionHooks()
        self._lock = threading.Lock()

        self.resolution: PortResolution = resolve_port(
            self.settings.INSTALL_ROOT,
            options=self.options,
            default=self.settings.DEFAULT_PORT,
            dir_name=self.settings.PORT_DIR_NAME,
            file_name=self.settings.PORT_FILE_NAME,
        )
        self._location = ServiceLocation(
            port=self.resolution.port,
            host=self.settings.SERVICE_HOST,
        )

        self.forwarder = ProxyForwarder(
            self.get_location,
            timeout=self.settings.PROXY_TIMEOUT,
            transport=transport,
        )
        self.notifier = EventNotifier(
            self.forwarder,
            order_lookup=order_lookup,
            user_lookup=user_lookup,
        )
        self.monitor = StatusMonitor(
            self.forwarder,
            self.get_location,
            cache=TransientCache(),
            timeout=self.settings.STATUS_TIMEOUT,
            notice_timeout=self.settings.NOTICE_TIMEOUT,
            notice_ttl=self.settings.NOTICE_CACHE_SECONDS,
        )

    # ── Location ──

    def get_location(self) -> ServiceLocation:
        with self._lock:
            return self._location

    @property
    def port(self) -> int:
        return self.get_location().port

    @property
    def base_url(self) -> str:
        return self.get_location().base_url

    def update_port(self, port: Any) -> ServiceLocation:
        """Persist a new port and repoint the bridge. Raises InvalidPort."""
        if isinstance(port, bool):
            raise InvalidPort(port, MIN_PORT, MAX_PORT)
        try:
            value = int(port)
        except (TypeError, ValueError, OverflowError):
            raise InvalidPort(port, MIN_PORT, MAX_PORT)
        if value < MIN_PORT or value > MAX_PORT:
            raise InvalidPort(port, MIN_PORT, MAX_PORT)

        with self._lock:
            self.options.set(PORT_OPTION, value)
            self._location = ServiceLocation(port=value, host=self.settings.SERVICE_HOST)
            location = self._location

        logger.info("Node Service Bridge: port updated to %s", value)
        return location

    # ── Calls ──

    async def call_service(
        self,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        method: str = "POST",
    ) -> Dict[str, Any]:
        """Call a companion endpoint; returns {success, data} or {success, error}"""
        payload = data if data else None
        result = await self.forwarder.forward(method, endpoint, payload)
        return result.to_dict()

    async def proxy(self, method: str, endpoint: str, body: Any = None) -> ForwardResult:
        return await self.forwarder.forward(method, endpoint, body if method.upper() == "POST" else None)

    async def status(self) -> StatusResult:
        return await self.monitor.check()

    # ── Hooks ──

    def register_hooks(self):
        """Wire CMS lifecycle actions to the event notifier"""
        self.hooks.add_action(PUBLISH_POST, self.notifier.post_published, background=True)
        self.hooks.add_action(USER_REGISTER, self.notifier.user_registered, background=True)
        self.hooks.add_action(ORDER_COMPLETED, self.notifier.order_completed, background=True)

    async def receive_webhook(self, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Handle an event pushed by the companion service"""
        data = data or {}
        raw = data.get("event") or data.get("type")
        event_type = str(raw) if raw else "unknown"
        logger.info("Received webhook from Node service: %s", event_type)
        await self.hooks.do_action(NODE_SERVICE_WEBHOOK, event_type, data)
        return {"received": True, "event": event_type}
