"""
API info and health check endpoints
"""
import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_async_session

logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()

router = APIRouter(tags=["Health"])


@router.get("")
async def api_root():
    """Basic API information"""
    prefix = settings.api_prefix_path
    return {
        "message": f"{settings.APP_NAME} is running",
        "documentation": f"{prefix}/docs",
        "version": settings.APP_VERSION,
        "endpoints": {
            "health": f"{prefix}/health",
            "declarations": f"{prefix}/health-declarations",
            "docs": f"{prefix}/docs",
        },
    }


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_async_session)):
    """Liveness plus database connectivity"""
    try:
        await db.execute(text("SELECT 1"))
        database_status = "connected"
    except Exception as e:
        logger.error(f"Health check database query failed: {e}")
        database_status = "disconnected"

    return {
        "status": "ok" if database_status == "connected" else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
        "service": "health-declaration-api",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "database": database_status,
    }
