"""AI, job, data, report and utility endpoints (stub implementations)"""
import random
import string
import time
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from ...utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Processing"])


class AIProcessRequest(BaseModel):
    prompt: Optional[str] = None
    context: Optional[Any] = None


class JobQueueRequest(BaseModel):
    jobType: Optional[str] = None


class DataImportRequest(BaseModel):
    format: Optional[str] = None
    data: Optional[Any] = None


def _now() -> str:
    return datetime.utcnow().isoformat()


def new_job_id() -> str:
    """job-<epoch ms>-<9 random base36 chars>"""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"job-{int(time.time() * 1000)}-{suffix}"


# ============ AI & Processing ============

@router.post("/ai/process")
async def ai_process(body: AIProcessRequest, request: Request):
    """Mock AI processing: echoes the prompt back"""
    settings = request.app.state.settings
    return {
        "result": f"AI Processing: {body.prompt}",
        "site": settings.SITE_NAME,
        "context": body.context,
        "model": "mock-ai-v1",
        "timestamp": _now(),
    }


@router.post("/jobs/queue")
async def queue_job(body: JobQueueRequest):
    """Accept a background job; nothing is actually queued"""
    job_id = new_job_id()
    logger.info("Queued job %s: %s", job_id, body.jobType)
    return {
        "queued": True,
        "jobId": job_id,
        "jobType": body.jobType,
        "status": "pending",
        "timestamp": _now(),
    }


# ============ Data Processing ============

@router.post("/data/import")
async def import_data(body: DataImportRequest):
    return {
        "success": True,
        "format": body.format,
        "rowCount": len(body.data) if isinstance(body.data, list) else 0,
        "message": "Data import endpoint ready for implementation",
    }


@router.get("/reports/{report_type}")
async def generate_report(report_type: str, request: Request):
    return {
        "report": report_type,
        "site": request.app.state.settings.SITE_NAME,
        "generated": _now(),
        "message": "Report generation endpoint ready for implementation",
    }


# ============ Utility ============

@router.get("/config")
async def get_config(request: Request):
    """Service configuration as seen by WordPress"""
    settings = request.app.state.settings
    return {
        "site": settings.SITE_NAME,
        "siteId": settings.SITE_ID,
        "wordpress": settings.WORDPRESS_URL,
        "port": settings.PORT,
        "environment": settings.NODE_ENV,
        "features": {
            "ai": True,
            "jobs": True,
            "sync": True,
            "webhooks": True,
        },
    }


@router.post("/cache/clear")
async def clear_cache():
    logger.info("Clearing caches...")
    return {
        "success": True,
        "message": "Caches cleared",
        "timestamp": _now(),
    }
