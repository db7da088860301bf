"""
NoteBoard — Health Check Route
===============================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Asks both stores for a lightweight health check and reports the
       aggregate status.
Who:   Called by Docker health checks, load balancers and monitoring.

Status levels:
    - healthy:   both stores reachable (HTTP 200)
    - unhealthy: either store unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from noteboard import __version__
from noteboard.schemas.board import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


async def _probe(store, name: str) -> str:
    try:
        if await store.health_check():
            return "available"
    except Exception as e:
        logger.warning("Health check: %s raised: %s", name, str(e))
        return "unavailable"
    logger.warning("Health check: %s unreachable", name)
    return "unavailable"


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "A store is unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request):
    state = request.app.state
    record_status = await _probe(state.record_store, "record store")
    blob_status = await _probe(state.blob_store, "blob store")
    healthy = record_status == blob_status == "available"

    body = HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=__version__,
        record_store=record_status,
        blob_store=blob_status,
        sessions=len(state.registry),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(status_code=200 if healthy else 503, content=body.model_dump())
