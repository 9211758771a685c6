"""WordPress integration routes: sync and call-wordpress"""
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..services.wordpress_client import WordPressClient
from ...utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["WordPress"])


class CallWordPressRequest(BaseModel):
    endpoint: str
    method: str = "GET"
    data: Optional[Any] = None


def get_wordpress(request: Request) -> WordPressClient:
    return request.app.state.wordpress


@router.get("/sync")
async def sync_with_wordpress(request: Request):
    """Fetch the ten most recent posts from the WordPress REST API"""
    wordpress = get_wordpress(request)
    logger.info("Syncing with WordPress at %s", wordpress.base_url)

    try:
        posts = await wordpress.recent_posts(per_page=10)
    except Exception as e:
        logger.error("Sync error: %s", e)
        return JSONResponse(
            status_code=500,
            content={"error": str(e), "wordpress": wordpress.base_url},
        )

    return {
        "success": True,
        "postCount": len(posts),
        "posts": posts,
        "wordpress": wordpress.base_url,
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.post("/call-wordpress")
async def call_wordpress(body: CallWordPressRequest, request: Request):
    """Forward a call to the bridge plugin's REST routes"""
    wordpress = get_wordpress(request)
    try:
        response = await wordpress.call_bridge(body.endpoint, body.method, body.data)
        result = response.json()
    except Exception as e:
        logger.error("call-wordpress %s failed: %s", body.endpoint, e)
        return JSONResponse(status_code=500, content={"error": str(e)})

    return {
        "success": response.is_success,
        "result": result,
        "statusCode": response.status_code,
    }
