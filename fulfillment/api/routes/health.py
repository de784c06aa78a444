"""Health & Readiness Probes — liveness for every service, readiness for the gateway.

Invariants:
    - GET /health always returns 200 {"status": "healthy", "service": <name>} if the process is up
    - GET /health/ready (gateway only) returns 503 if any downstream is unreachable

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from fulfillment.api.routes.dependencies import get_gateway_router
from fulfillment.services.gateway_router import GatewayRouter

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])
readiness_router = APIRouter(prefix="/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """Basic liveness probe. Returns 200 if the process is up."""
    return {"status": "healthy", "service": request.app.state.service_name}


@readiness_router.get("/ready")
async def readiness_check(gateway: GatewayRouter = Depends(get_gateway_router)):
    """Readiness probe — includes downstream connectivity."""
    checks = await gateway.readiness()
    report = {
        name: "healthy" if ok else "unavailable" for name, ok in checks.items()
    }
    if not all(checks.values()):
        logger.warning(f"Gateway not ready: {report}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "checks": report},
        )
    return {"status": "ready", "checks": report}
