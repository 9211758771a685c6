"""
Proxy forwarder: send a JSON request to the companion service and decode
the JSON response. Backs the proxy route, call_service and event delivery.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import httpx

from ...exceptions import InvalidEndpoint, MalformedResponse, ServiceUnreachable
from ...models.schemas import ServiceLocation
from ...utils.logging_config import get_logger

logger = get_logger(__name__)

ENDPOINT_PATTERN = re.compile(r"^[a-zA-Z0-9\-/]+$")
DEFAULT_TIMEOUT = 30.0


@dataclass
class ForwardResult:
    success: bool
    data: Any = None
    error: Optional[str] = None
    status_code: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}


def validate_endpoint(endpoint: str) -> str:
    """Return the endpoint without leading slashes, or raise InvalidEndpoint."""
    if not endpoint or not ENDPOINT_PATTERN.match(endpoint):
        raise InvalidEndpoint(endpoint)
    cleaned = endpoint.lstrip("/")
    if not cleaned:
        raise InvalidEndpoint(endpoint)
    return cleaned


def decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        raise MalformedResponse(str(response.request.url))


class ProxyForwarder:
    """Forwards requests to whatever location ``location_getter`` returns."""

    def __init__(
        self,
        location_getter: Callable[[], ServiceLocation],
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._location = location_getter
        self.timeout = timeout
        self._transport = transport

    def url_for(self, endpoint: str) -> str:
        return f"{self._location().base_url}/{validate_endpoint(endpoint)}"

    async def send(
        self,
        method: str,
        endpoint: str,
        data: Any = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """Issue the request; raises ServiceUnreachable on transport failures."""
        url = self.url_for(endpoint)
        method = method.upper()
        kwargs: Dict[str, Any] = {
            "headers": {"Content-Type": "application/json"},
        }
        if method != "GET" and data is not None:
            kwargs["json"] = data

        try:
            async with httpx.AsyncClient(
                timeout=timeout or self.timeout,
                transport=self._transport,
            ) as client:
                return await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            reason = str(e) or type(e).__name__
            raise ServiceUnreachable(url, reason) from e

    async def forward(
        self,
        method: str,
        endpoint: str,
        data: Any = None,
        timeout: Optional[float] = None,
    ) -> ForwardResult:
        """
        Forward a request and decode the JSON body.

        Transport failures become ``success=False``; a body that is not JSON
        yields ``data=None``. Raises InvalidEndpoint for unsafe paths.
        """
        try:
            response = await self.send(method, endpoint, data, timeout)
        except ServiceUnreachable as e:
            logger.warning("Node service call failed %s %s: %s", method, e.url, e.reason)
            return ForwardResult(success=False, error=e.reason)

        try:
            body = decode_json(response)
        except MalformedResponse as e:
            logger.warning("%s", e)
            body = None

        return ForwardResult(success=True, data=body, status_code=response.status_code)
