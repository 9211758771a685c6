"""
Shared fixtures for bridge tests.

Outbound HTTP never leaves the process: the bridge client is built with an
``httpx.MockTransport`` standing in for the Node service.
"""

import json

import httpx
import pytest

from node_bridge.client.bridge import BridgeClient
from node_bridge.client.services.storage import OptionStore
from node_bridge.utils.config import BridgeSettings

ADMIN_KEY = "test-admin-key"


def echo_handler(request: httpx.Request) -> httpx.Response:
    """Node service double: /health answers, everything else echoes its body"""
    if request.url.path == "/health":
        return httpx.Response(200, json={"status": "healthy", "site": "Test Site"})
    body = json.loads(request.content) if request.content else {"method": request.method}
    return httpx.Response(200, json=body)


def offline_handler(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("Connection refused", request=request)


@pytest.fixture
def install_root(tmp_path):
    """A Local-style site layout: <tmp>/site/app/public"""
    root = tmp_path / "site" / "app" / "public"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def bridge_settings(tmp_path, install_root):
    return BridgeSettings(
        INSTALL_ROOT=str(install_root),
        OPTIONS_FILE=str(tmp_path / "options.json"),
        ADMIN_API_KEY=ADMIN_KEY,
    )


@pytest.fixture
def options(bridge_settings):
    return OptionStore(bridge_settings.OPTIONS_FILE)


@pytest.fixture
def make_bridge(bridge_settings, options):
    """Factory: BridgeClient talking to a MockTransport handler"""
    def _make(handler=echo_handler, **kwargs):
        return BridgeClient(
            bridge_settings,
            options=options,
            transport=httpx.MockTransport(handler),
            **kwargs,
        )
    return _make


@pytest.fixture
def bridge(make_bridge):
    return make_bridge()


@pytest.fixture
def offline_bridge(make_bridge):
    return make_bridge(offline_handler)
