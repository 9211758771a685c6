"""
Integration tests: bridge client talking to the real companion app
in-process through httpx.ASGITransport.
"""
import httpx
import pytest
from fastapi.testclient import TestClient

from node_bridge.client.bridge import BridgeClient
from node_bridge.client.main import create_app as create_cms_app
from node_bridge.service.main import create_app as create_service_app
from node_bridge.utils.config import ServiceSettings


@pytest.fixture
def service_app():
    return create_service_app(ServiceSettings(PORT=3000, SITE_NAME="Roundtrip"))


@pytest.fixture
def connected_bridge(bridge_settings, options, service_app):
    return BridgeClient(
        bridge_settings,
        options=options,
        transport=httpx.ASGITransport(app=service_app),
    )


class TestRoundTrip:

    @pytest.mark.asyncio
    async def test_status_connected(self, connected_bridge):
        result = await connected_bridge.status()
        assert result.status == "connected"
        assert result.response["site"] == "Roundtrip"

    @pytest.mark.asyncio
    async def test_post_published_acknowledged(self, connected_bridge):
        connected_bridge.register_hooks()
        result = await connected_bridge.notifier.post_published(5, {"title": "Hello", "slug": "hello"})

        assert result.success is True
        assert result.data["received"] is True
        assert result.data["event"] == "post_published"

    @pytest.mark.asyncio
    async def test_unknown_path_relayed(self, connected_bridge):
        result = await connected_bridge.call_service("does/not/exist", method="GET")
        assert result["success"] is True
        assert result["data"]["error"] == "Endpoint not found"

    def test_proxy_route_through_cms_app(self, connected_bridge):
        client = TestClient(create_cms_app(connected_bridge))
        data = client.post("/bridge/v1/proxy/ai/process", json={"prompt": "Draft", "context": {"a": 1}}).json()
        assert data["result"] == "AI Processing: Draft"
        assert data["context"] == {"a": 1}

    @pytest.mark.asyncio
    async def test_publish_survives_offline_service(self, make_bridge):
        def offline(request):
            raise httpx.ConnectError("Connection refused", request=request)

        client = make_bridge(offline)
        client.register_hooks()

        completed = await client.hooks.do_action("publish_post", 5, {"title": "Hello"})
        assert completed == 1

        await client.hooks.drain()
        assert client.hooks.pending == 0
