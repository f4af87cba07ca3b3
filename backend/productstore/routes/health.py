"""
Product Store — Health Check Route
===================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Sends a `ping` command to MongoDB through the shared client.
Who:   Called by container health checks, load balancers, and monitoring.

Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request

from productstore import __version__
from productstore.schemas.product import HealthResponse, ProductJSONResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request) -> ProductJSONResponse:
    """Ping the database and report aggregate status with uptime."""
    db_status = "connected"
    overall = "healthy"

    try:
        await request.app.state.mongo_client.admin.command("ping")
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    body = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return ProductJSONResponse(
        body.model_dump(),
        status_code=200 if overall == "healthy" else 503,
    )
