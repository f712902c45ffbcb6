"""
Jotter: Health Check Route
============================

What:  GET /health for monitoring and load balancer probes.
How:   Asks the note store for a lightweight connectivity probe
       (SELECT 1 on the SQL backend).

Status levels:
    healthy:   store reachable (HTTP 200)
    unhealthy: store unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response

from jotter import __version__
from jotter.context import get_store
from jotter.schemas.note import HealthResponse
from jotter.services.store_base import NoteStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(response: Response, store: NoteStore = Depends(get_store)) -> HealthResponse:
    reachable = await store.ping()
    if not reachable:
        response.status_code = 503

    return HealthResponse(
        status="healthy" if reachable else "unhealthy",
        version=__version__,
        database="connected" if reachable else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
