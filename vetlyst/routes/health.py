"""
Vetlyst Backend — Health Check Route
======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Checks the database with SELECT 1 and reports the email sender state.

Status levels:
    - healthy:   Database reachable and email available
    - degraded:  Database reachable, email not configured or circuit open
                 (submissions still persist; notifications are skipped)
    - unhealthy: Database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text

from vetlyst import __version__
from vetlyst.database import engine
from vetlyst.schemas.common import HealthResponse
from vetlyst.services.notification_service import (
    NotificationService,
    get_notification_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    notifier: NotificationService = Depends(get_notification_service),
):
    db_status = "connected"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    email_status = notifier.sender.status()
    if email_status != "available" and overall == "healthy":
        overall = "degraded"

    body = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        email=email_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if overall == "unhealthy":
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
