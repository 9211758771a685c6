"""
Node Service Bridge - CMS side

REST surface of the bridge plugin: status, port update, proxy and the
webhook receiver for events pushed by the Node service.

Usage:
    uvicorn node_bridge.client.main:app --port 8080
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .bridge import BridgeClient
from .routers import bridge_router
from ..exceptions import InvalidEndpoint, InvalidPort
from ..utils.config import BridgeSettings
from ..utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def create_app(bridge: Optional[BridgeClient] = None) -> FastAPI:
    """Build the CMS-side app around one BridgeClient instance."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        current: BridgeClient = app.state.bridge
        logger.info(
            "%s v%s: Node service at %s (port via %s)",
            current.settings.APP_NAME,
            current.settings.APP_VERSION,
            current.base_url,
            current.resolution.method,
        )
        yield
        # Let in-flight event notifications finish before shutdown
        await current.hooks.drain()

    if bridge is None:
        settings = BridgeSettings()
        setup_logging(settings.LOG_LEVEL)
        bridge = BridgeClient(settings)
        bridge.register_hooks()

    app = FastAPI(
        title=bridge.settings.APP_NAME,
        description="Bridge between the CMS and its companion Node service",
        version=bridge.settings.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.bridge = bridge
    app.include_router(bridge_router)

    @app.exception_handler(InvalidPort)
    async def invalid_port_handler(request: Request, exc: InvalidPort):
        return JSONResponse(
            status_code=400,
            content={"code": "invalid_port", "message": str(exc)},
        )

    @app.exception_handler(InvalidEndpoint)
    async def invalid_endpoint_handler(request: Request, exc: InvalidEndpoint):
        return JSONResponse(
            status_code=400,
            content={"code": "invalid_endpoint", "message": str(exc)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": str(exc),
                "type": type(exc).__name__,
                "path": str(request.url.path),
                "timestamp": datetime.utcnow().isoformat(),
            },
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("node_bridge.client.main:app", host="127.0.0.1", port=8080)
