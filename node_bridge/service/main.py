"""
Node Service Bridge - Companion Service

Local HTTP service that WordPress delegates work to (AI, jobs, data
import, reports) and pushes lifecycle events at via /webhook.

Usage:
    uvicorn node_bridge.service.main:app --host 127.0.0.1 --port 3000
"""
import os
import time
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .routers import processing_router, webhook_router, wordpress_router
from .services.wordpress_client import WordPressClient
from ..utils.config import ServiceSettings
from ..utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)

ENDPOINTS = [
    ("GET", "/health", "Service health check"),
    ("GET", "/sync", "Sync with WordPress"),
    ("POST", "/webhook", "Receive WordPress webhooks"),
    ("POST", "/ai/process", "AI processing"),
    ("POST", "/jobs/queue", "Queue background jobs"),
    ("GET", "/config", "Get service configuration"),
]


def write_port_file(path: Path, port: int) -> None:
    """Publish the listening port for the bridge client's port discovery"""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"{port}\n", encoding="utf-8")


def create_app(
    settings: Optional[ServiceSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the companion app. ``transport`` is used for calls to WordPress."""
    settings = settings or ServiceSettings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        app.state.started = time.monotonic()
        port_file = Path(settings.PORT_FILE) if settings.PORT_FILE else None
        if port_file is not None:
            try:
                write_port_file(port_file, settings.PORT)
            except OSError as e:
                logger.warning("Could not write port file %s: %s", port_file, e)
                port_file = None

        logger.info("Node-WordPress Bridge Service started")
        logger.info("Port: %s  WordPress: %s", settings.PORT, settings.WORDPRESS_URL)
        logger.info("Site: %s  Site ID: %s", settings.SITE_NAME, settings.SITE_ID)
        for method, path, description in ENDPOINTS:
            logger.info("  %-4s %-15s - %s", method, path, description)
        yield
        # Shutdown
        if port_file is not None:
            try:
                port_file.unlink()
            except FileNotFoundError:
                pass
        logger.info("Shutting down...")

    app = FastAPI(
        title="Node-WordPress Bridge Service",
        description="Companion service for the Node Service Bridge plugin",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.started = time.monotonic()
    app.state.wordpress = WordPressClient(
        settings.WORDPRESS_URL,
        timeout=settings.WORDPRESS_TIMEOUT,
        transport=transport,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.WORDPRESS_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    @app.get("/health")
    async def health_check(request: Request):
        return {
            "status": "healthy",
            "wordpress": settings.WORDPRESS_URL,
            "site": settings.SITE_NAME,
            "siteId": settings.SITE_ID,
            "timestamp": datetime.utcnow().isoformat(),
            "uptime": time.monotonic() - request.app.state.started,
            "pid": os.getpid(),
        }

    app.include_router(webhook_router)
    app.include_router(wordpress_router)
    app.include_router(processing_router)

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        # Unknown path or method: same answer as an unmatched route
        if exc.status_code in (404, 405):
            return JSONResponse(
                status_code=404,
                content={
                    "error": "Endpoint not found",
                    "path": request.url.path,
                    "method": request.method,
                },
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Error: %s", exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": str(exc) or "Internal server error",
                "timestamp": datetime.utcnow().isoformat(),
            },
        )

    return app


def _app_from_env() -> FastAPI:
    settings = ServiceSettings()
    setup_logging(settings.LOG_LEVEL)
    return create_app(settings)


app = _app_from_env()


# For running with python -m
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=app.state.settings.PORT)
