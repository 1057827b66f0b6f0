"""
MindEase Backend — Health Check Route
=======================================

What:  GET /health for container probes and load balancers.
How:   One round trip through the DataStore (SELECT 1).

Status levels:
    healthy    database reachable
    unhealthy  database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from mindease import __version__
from mindease.database import get_store
from mindease.exceptions import DataAccessError
from mindease.schemas.common import HealthResponse
from mindease.storage.base import DataStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(store: DataStore = Depends(get_store)):
    db_status = "connected"
    overall = "healthy"

    try:
        await store.ping()
    except DataAccessError as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", e.context)

    body = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if overall == "unhealthy":
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
