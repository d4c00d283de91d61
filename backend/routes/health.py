"""Health and readiness check routes."""

import logging

from fastapi import APIRouter, Request

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/ready")
async def ready(request: Request) -> dict:
    """Lightweight readiness check — no I/O."""
    settings = request.app.state.hotlist.settings
    return {"status": "ok", "service": "hotlist-api", "commit": settings.git_sha}


@router.get("/health")
async def health(request: Request) -> dict:
    """Reports collection size and the outcome of the last ingestion cycle."""
    services = request.app.state.hotlist
    last = services.cycle.last_result

    result = {
        "status": "ok",
        "service": "hotlist-api",
        "commit": services.settings.git_sha,
        "read_mode": "cache" if services.cache is not None else "file",
        "scheduler": "running" if services.scheduler.running else "stopped",
        "last_cycle": last.to_dict() if last is not None else None,
    }
    result["records"] = len(await services.current_collection())
    return result
