"""
NoteAssist Backend — Health Check Routes
=========================================

What:  GET /health (dependency-aware) and GET /api/test (plain liveness).
Who:   Docker health checks, load balancers, and the frontend's connectivity probe.

Status levels:
    - healthy:   database and AI provider reachable (HTTP 200)
    - degraded:  AI provider unreachable; notes still work (HTTP 200)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text

from noteassist import __version__
from noteassist.database import engine
from noteassist.schemas.common import HealthResponse, StatusResponse
from noteassist.services.llm_base import LLMService
from noteassist.services.providers import get_llm_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/api/test",
    response_model=StatusResponse,
    summary="Liveness probe",
)
async def api_test() -> StatusResponse:
    return StatusResponse(status="API is working!")


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(llm: LLMService = Depends(get_llm_service)):
    """
    Probes the database (SELECT 1) and the AI provider (model listing).
    """
    db_status = "connected"
    ai_status = "available"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    if not await llm.health_check():
        ai_status = "unavailable"
        if overall != "unhealthy":
            overall = "degraded"

    body = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        ai_provider=llm.name,
        ai=ai_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if overall == "unhealthy":
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
