"""Companion health checks and the cached admin warning"""
from typing import Callable, Optional

from .forwarder import ProxyForwarder, decode_json
from .storage import TransientCache
from ...exceptions import MalformedResponse, ServiceUnreachable
from ...models.schemas import AdminNotice, ServiceLocation, StatusResult
from ...utils.logging_config import get_logger

logger = get_logger(__name__)

LAST_CHECK_KEY = "node_service_last_check"


class StatusMonitor:
    """Probe the companion's /health endpoint"""

    def __init__(
        self,
        forwarder: ProxyForwarder,
        location_getter: Callable[[], ServiceLocation],
        cache: Optional[TransientCache] = None,
        timeout: float = 5.0,
        notice_timeout: float = 2.0,
        notice_ttl: int = 300,
    ):
        self.forwarder = forwarder
        self._location = location_getter
        self.cache = cache or TransientCache()
        self.timeout = timeout
        self.notice_timeout = notice_timeout
        self.notice_ttl = notice_ttl

    async def check(self, timeout: Optional[float] = None) -> StatusResult:
        port = self._location().port
        try:
            response = await self.forwarder.send("GET", "health", timeout=timeout or self.timeout)
        except ServiceUnreachable as e:
            return StatusResult(
                status="error",
                message="Node service not responding",
                port=port,
                error=e.reason,
            )

        try:
            body = decode_json(response)
        except MalformedResponse:
            body = None
        return StatusResult(status="connected", port=port, response=body)

    async def admin_notice(self) -> Optional[AdminNotice]:
        """
        Warning for the admin screen when the service is down.

        Probes at most once per ``notice_ttl`` seconds; within that window
        returns None without touching the network.
        """
        if self.cache.get(LAST_CHECK_KEY) is not None:
            return None

        result = await self.check(timeout=self.notice_timeout)
        self.cache.set(LAST_CHECK_KEY, True, ttl=self.notice_ttl)

        if result.status == "connected":
            return None
        logger.warning("Node service is not responding on port %s", result.port)
        return AdminNotice(
            message=(
                f"The Node.js service is not responding on port {result.port}. "
                "Some features may be unavailable."
            )
        )
