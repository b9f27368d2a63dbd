"""
Transporter Backend — Health Check Route
==========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Pings the database handle attached to the application.
Who:   Called by container health checks and load balancers.

Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503, stop routing traffic)
"""

import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from transporter import __version__
from transporter.schemas.common import HealthResponse

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request):
    """
    Check that the service can reach its database.

    SELECT 1 is essentially free, so probes every few seconds are fine.
    """
    database = request.app.state.database
    connected = await database.ping()

    body = HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(
        status_code=200 if connected else 503,
        content=body.model_dump(),
    )
