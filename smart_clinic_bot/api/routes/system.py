"""Service routes: banner and health."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ...container import ServiceContext
from ..dependencies import get_context

router = APIRouter(tags=["system"])


@router.get("/")
async def root():
    return {"success": True, "message": "🚀 Smart Clinic Bot API", "status": "running"}


@router.get("/health")
async def health_check(context: ServiceContext = Depends(get_context)):
    checks = await context.health_check()
    healthy = all(checks.values())
    return {
        "success": healthy,
        "status": "OK" if healthy else "degraded",
        "checks": checks,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
