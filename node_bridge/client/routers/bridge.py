"""CMS REST routes under /bridge/v1"""
import secrets
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader

from ..bridge import BridgeClient
from ...models.schemas import AdminNotice, PortUpdateRequest, StatusResult, WebhookReceipt


router = APIRouter(prefix="/bridge/v1", tags=["Bridge"])

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def get_bridge(request: Request) -> BridgeClient:
    return request.app.state.bridge


async def require_admin(
    request: Request,
    api_key: Optional[str] = Depends(api_key_header),
) -> None:
    """Admin capability check: X-API-Key must match BRIDGE_ADMIN_API_KEY"""
    expected = get_bridge(request).settings.ADMIN_API_KEY
    if not expected or not api_key or not secrets.compare_digest(api_key, expected):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Sorry, you are not allowed to do that.",
        )


@router.get("/status", response_model=StatusResult, response_model_exclude_none=True)
async def get_service_status(bridge: BridgeClient = Depends(get_bridge)):
    """Companion health plus the configured port"""
    return await bridge.status()


@router.post("/port", dependencies=[Depends(require_admin)])
async def update_service_port(
    body: PortUpdateRequest,
    bridge: BridgeClient = Depends(get_bridge),
):
    """
    Repoint the bridge at a different port.

    Out-of-range values are rejected with 400 ``invalid_port``.
    """
    location = bridge.update_port(body.port)
    return {"success": True, "port": location.port}


@router.get("/notice", dependencies=[Depends(require_admin)])
async def get_admin_notice(bridge: BridgeClient = Depends(get_bridge)):
    """Dismissible warning when the service is down (probed at most every 5 minutes)"""
    notice: Optional[AdminNotice] = await bridge.monitor.admin_notice()
    return {"notice": notice.model_dump() if notice else None}


@router.api_route("/proxy/{endpoint:path}", methods=["GET", "POST"])
async def proxy_to_node(
    endpoint: str,
    request: Request,
    bridge: BridgeClient = Depends(get_bridge),
):
    """Forward the request to the Node service and relay its JSON body"""
    body: Any = None
    if request.method == "POST":
        raw = await request.body()
        if raw:
            try:
                body = await request.json()
            except ValueError:
                raise HTTPException(status_code=400, detail="Request body is not valid JSON")

    result = await bridge.proxy(request.method, endpoint, body)
    if not result.success:
        return JSONResponse(
            status_code=502,
            content={"code": "proxy_error", "message": result.error},
        )
    return JSONResponse(content=result.data)


@router.post("/webhook", response_model=WebhookReceipt)
async def receive_webhook(
    request: Request,
    bridge: BridgeClient = Depends(get_bridge),
):
    """Events pushed by the Node service"""
    try:
        data: Dict[str, Any] = await request.json()
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {}
    return await bridge.receive_webhook(data)
