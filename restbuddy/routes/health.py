"""
RestBuddy: Health Check Route
===============================

What:  GET /health for container orchestrators and load balancers.
How:   Runs SELECT 1 against the engine and lists the registered resources.

Status levels:
    healthy:   database reachable (HTTP 200)
    unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request, Response
from sqlalchemy import text

from restbuddy import __version__
from restbuddy import database
from restbuddy.schemas.responses import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable: %s", str(e))

    registry = getattr(request.app.state, "registry", None)
    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        resources=sorted(registry) if registry is not None else [],
        uptime_seconds=round(time.time() - _start_time, 2),
    )
