"""Health Probes — liveness and database readiness.

Invariants:
    - GET /health answers 200 whenever the process serves requests
    - GET /health/ready answers 503 until the pool exists and the database responds
    - Neither probe requires a bearer token
"""

from datetime import datetime, timezone

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from procgate.infrastructure import database

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def liveness():
    return {
        "status": "ok",
        "service": "procgate",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/ready")
async def readiness():
    """Database ping through the shared pool."""
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
