"""
TIL Backend — Health Check Route
=================================

What:  GET /health for load balancers and container probes.
How:   Runs SELECT 1 on the request's session and reports uptime.

    database reachable   → 200 {"status": "healthy",   "database": "connected", ...}
    database unreachable → 503 {"status": "unhealthy", "database": "disconnected", ...}

Exempt from rate limiting and access logging.
"""

import logging
import time

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app import __version__
from app.database import get_db_session
from app.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_started_at = time.monotonic()


async def database_reachable(db: AsyncSession) -> bool:
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Health check: database unreachable: %s", str(e))
        # Leaves the session clean for the dependency's commit
        await db.rollback()
        return False
    return True


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse, "description": "Database unreachable"}},
    summary="Service health check",
)
async def health_check(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> HealthResponse:
    connected = await database_reachable(db)
    if not connected:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.monotonic() - _started_at, 2),
    )
