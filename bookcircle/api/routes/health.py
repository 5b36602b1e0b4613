"""Health Checks: liveness for the process, readiness for the database.

Invariants:
    - GET /api/v1/health/ is 200 whenever the app can answer
    - GET /api/v1/health/ready is 503 until the database answers a ping
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from bookcircle import __version__
from bookcircle.infrastructure import database

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/")
async def liveness():
    return {"status": "healthy", "service": "bookcircle-api", "version": __version__}


@router.get("/ready")
async def readiness():
    manager = database.db_manager
    if manager is not None and await manager.health_check():
        return {"status": "ready", "checks": {"database": "healthy"}}
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": "database_unavailable"},
    )
