"""Health check endpoints for load balancers and monitoring."""

import logging
from datetime import datetime

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.config import settings
from app.database import engine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

SERVICE_NAME = "teagarden-cms"


@router.get("/health")
async def health_check():
    """Lightweight liveness check (no DB check).

    Returns 200 OK if the process is serving requests.
    """
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "timestamp": datetime.utcnow().isoformat(),
        "environment": settings.environment,
    }


@router.get("/health/ready")
async def readiness_check():
    """Readiness check: 200 only when the database answers ``SELECT 1``."""
    checks = {"service": "ok", "database": "unknown"}
    healthy = True

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        checks["database"] = f"error: {str(e)[:100]}"
        healthy = False

    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "service": SERVICE_NAME,
            "checks": checks,
            "timestamp": datetime.utcnow().isoformat(),
        },
    )
