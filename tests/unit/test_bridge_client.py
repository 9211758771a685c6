"""Tests for BridgeClient: location handling, port updates and service calls."""

import json
import math

import httpx
import pytest

from node_bridge.client.bridge import NODE_SERVICE_WEBHOOK, BridgeClient
from node_bridge.client.services.locator import PORT_OPTION
from node_bridge.exceptions import InvalidPort


class TestLocation:

    def test_default_location(self, bridge):
        assert bridge.port == 3000
        assert bridge.base_url == "http://localhost:3000"
        assert bridge.resolution.method == "default"

    def test_marker_file_used_at_construction(self, tmp_path, bridge_settings, options):
        marker = tmp_path / "site" / "node-wp-bridge" / ".port"
        marker.parent.mkdir(parents=True)
        marker.write_text("4321")
        options.set(PORT_OPTION, 5555)

        client = BridgeClient(bridge_settings, options=options)

        assert client.port == 4321
        assert client.resolution.method == "file"

    def test_location_cached_for_process_lifetime(self, tmp_path, bridge):
        marker = tmp_path / "site" / "node-wp-bridge" / ".port"
        marker.parent.mkdir(parents=True)
        marker.write_text("4321")
        assert bridge.port == 3000


class TestUpdatePort:

    @pytest.mark.parametrize("port", [1024, 3001, 8080, 65535])
    def test_valid_ports(self, bridge, options, port):
        location = bridge.update_port(port)

        assert location.port == port
        assert bridge.port == port
        assert bridge.base_url == f"http://localhost:{port}"
        assert options.get(PORT_OPTION) == port

    def test_numeric_string_accepted(self, bridge):
        assert bridge.update_port("4000").port == 4000

    @pytest.mark.parametrize("port", [0, 80, 1023, 65536, 100000, -1, "abc", None, True, math.inf, -math.inf, math.nan])
    def test_invalid_ports_rejected(self, bridge, options, port):
        bridge.update_port(4000)

        with pytest.raises(InvalidPort):
            bridge.update_port(port)

        assert bridge.port == 4000
        assert bridge.base_url == "http://localhost:4000"
        assert options.get(PORT_OPTION) == 4000

    def test_persisted_port_used_by_next_process(self, bridge, bridge_settings, options):
        bridge.update_port(4444)
        restarted = BridgeClient(bridge_settings, options=options)
        assert restarted.port == 4444
        assert restarted.resolution.method == "option"

    @pytest.mark.asyncio
    async def test_calls_follow_updated_port(self, make_bridge):
        hosts = []

        def handler(request):
            hosts.append(request.url.port)
            return httpx.Response(200, json={})

        client = make_bridge(handler)
        await client.call_service("health", method="GET")
        client.update_port(4100)
        await client.call_service("health", method="GET")

        assert hosts == [3000, 4100]


class TestCallService:

    @pytest.mark.asyncio
    async def test_success_shape(self, bridge):
        result = await bridge.call_service("ai/process", {"prompt": "hello"})
        assert result == {"success": True, "data": {"prompt": "hello"}}

    @pytest.mark.asyncio
    async def test_empty_data_sends_no_body(self, make_bridge):
        bodies = []

        def handler(request):
            bodies.append(request.content)
            return httpx.Response(200, json={"ok": True})

        await make_bridge(handler).call_service("cache/clear", {})
        assert bodies == [b""]

    @pytest.mark.asyncio
    async def test_offline_shape(self, offline_bridge):
        result = await offline_bridge.call_service("health", method="GET")
        assert result["success"] is False
        assert "Connection refused" in result["error"]

    @pytest.mark.asyncio
    async def test_proxy_drops_body_for_get(self, make_bridge):
        seen = []

        def handler(request):
            seen.append((request.method, request.content))
            return httpx.Response(200, json={})

        await make_bridge(handler).proxy("GET", "config", {"a": 1})
        assert seen == [("GET", b"")]


class TestReceiveWebhook:

    @pytest.mark.asyncio
    async def test_event_field(self, bridge):
        received = []
        bridge.hooks.add_action(NODE_SERVICE_WEBHOOK, lambda event, data: received.append((event, data)))

        result = await bridge.receive_webhook({"event": "job_done", "data": {"id": 1}})

        assert result == {"received": True, "event": "job_done"}
        assert received == [("job_done", {"event": "job_done", "data": {"id": 1}})]

    @pytest.mark.asyncio
    async def test_type_field_fallback(self, bridge):
        result = await bridge.receive_webhook({"type": "report_ready"})
        assert result["event"] == "report_ready"

    @pytest.mark.asyncio
    async def test_missing_event_is_unknown(self, bridge):
        assert await bridge.receive_webhook(None) == {"received": True, "event": "unknown"}

    @pytest.mark.asyncio
    async def test_non_string_event_stringified(self, bridge):
        received = []
        bridge.hooks.add_action(NODE_SERVICE_WEBHOOK, lambda event, data: received.append(event))

        assert await bridge.receive_webhook({"event": 42}) == {"received": True, "event": "42"}
        assert received == ["42"]


class TestRegisterHooks:

    @pytest.mark.asyncio
    async def test_publish_post_notifies_service(self, make_bridge):
        sent = []

        def handler(request):
            sent.append(json.loads(request.content))
            return httpx.Response(200, json={"received": True})

        client = make_bridge(handler)
        client.register_hooks()

        await client.hooks.do_action("publish_post", 5, {"post_title": "Hello", "post_name": "hello"})
        # scheduled, not yet sent
        assert sent == []
        assert client.hooks.pending == 1

        await client.hooks.drain()

        assert client.hooks.pending == 0
        assert sent[0]["event"] == "post_published"
        assert sent[0]["data"]["id"] == 5
        assert sent[0]["data"]["title"] == "Hello"
