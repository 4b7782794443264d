"""
Health Check Router

``/health`` is the plain liveness probe used by load balancers and returns
``{"status": "OK"}`` without touching the database. ``/health/detailed``
additionally pings the database and reports uptime.
"""

import time
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ...config import Settings, get_logger, get_settings
from ...infrastructure.database import DatabaseManager
from ..dependencies import get_database_manager

router = APIRouter(tags=["health"])
logger = get_logger(__name__)

# Track application startup time for uptime calculation
app_startup_time = time.time()


@router.get("/health")
def basic_health_check() -> dict[str, str]:
    return {"status": "OK"}


@router.get("/health/detailed")
def detailed_health_check(
    db: DatabaseManager = Depends(get_database_manager),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """
    Health status including database connectivity.

    Returns 503 with ``status: DEGRADED`` when the database cannot be reached.
    """
    database_ok = db.ping()
    if not database_ok:
        logger.warning("Detailed health check found database unavailable")

    body: dict[str, Any] = {
        "status": "OK" if database_ok else "DEGRADED",
        "components": {"database": "healthy" if database_ok else "unhealthy"},
        "version": settings.app_version,
        "environment": settings.environment,
        "uptime_seconds": round(time.time() - app_startup_time, 2),
    }
    return JSONResponse(status_code=200 if database_ok else 503, content=body)
