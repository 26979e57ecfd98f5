"""
Note Pad API: Health Check Route
==================================

What:  Liveness/readiness endpoint for load balancers and container probes.
How:   Runs SELECT 1 through the application's session factory.

Status levels:
    - ok:       database answered
    - degraded: database unreachable (still HTTP 200 so the probe can read the body)
"""

import logging
import time

from fastapi import APIRouter, Request
from sqlalchemy import text

from notepad import __version__
from notepad.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

SERVICE_MESSAGE = "Note Pad API Services"

_start_time = time.time()


@router.get(
    "/healthcheck",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    db_status = "connected"
    overall = "ok"

    try:
        async with request.app.state.session_factory() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "degraded"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        message=SERVICE_MESSAGE,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
