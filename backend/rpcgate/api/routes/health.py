"""Health & Readiness Probes — liveness and readiness endpoints.

Invariants:
    - GET /api/health/ always returns 200 if process is up (liveness)
    - GET /api/health/ready returns 503 if the database or the RPC router is missing
"""

import logging
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

import rpcgate.infrastructure.database as db_module

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {"status": "healthy", "service": "rpcgate"}


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe — database connectivity and a registered procedure table."""
    db_manager = db_module.db_manager
    db_ok = await db_manager.health_check() if db_manager else False
    rpc = getattr(request.app.state, "rpc_router", None)
    if not db_ok or rpc is None:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable" if not db_ok else "router_uninitialized",
            },
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy"},
        "procedures": len(rpc.registry),
    }
