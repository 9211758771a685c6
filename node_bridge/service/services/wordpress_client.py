"""HTTP client for calls from the Node service back into WordPress"""
from typing import Any, Dict, List, Optional

import httpx

from ...exceptions import ServiceUnreachable
from ...utils.logging_config import get_logger

logger = get_logger(__name__)


class WordPressError(Exception):
    """WordPress answered with a non-2xx status"""
    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"WordPress API returned {status_code}")


class WordPressClient:
    """Talks to the WordPress REST API and the bridge plugin's routes"""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                return await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise ServiceUnreachable(url, str(e) or type(e).__name__) from e

    async def recent_posts(self, per_page: int = 10) -> List[Dict[str, Any]]:
        """Latest posts reshaped to {id, title, date, link}"""
        url = f"{self.base_url}/wp-json/wp/v2/posts"
        response = await self._request("GET", url, params={"per_page": per_page})
        if not response.is_success:
            raise WordPressError(response.status_code)

        posts = response.json()
        return [
            {
                "id": post.get("id"),
                "title": (post.get("title") or {}).get("rendered"),
                "date": post.get("date"),
                "link": post.get("link"),
            }
            for post in posts
        ]

    async def call_bridge(
        self,
        endpoint: str,
        method: str = "GET",
        data: Any = None,
    ) -> httpx.Response:
        """Call the bridge plugin's /wp-json/bridge/v1/{endpoint} route"""
        url = f"{self.base_url}/wp-json/bridge/v1/{endpoint.lstrip('/')}"
        method = method.upper()
        kwargs: Dict[str, Any] = {"headers": {"Content-Type": "application/json"}}
        if method != "GET":
            kwargs["json"] = data
        return await self._request(method, url, **kwargs)
