"""
Health check endpoints.

Liveness says the process is up; readiness also checks that the
database answers and that a session secret is configured.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from shared.config import Settings

from ..dependencies import get_app_settings, get_container

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: str
    sessions: str


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Returns 200 while the API is running."""
    return HealthResponse(status="healthy", version=settings.app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check():
    """Returns 200 when dependencies are usable, 503 otherwise."""
    container = get_container()

    database = "connected"
    try:
        container.admin_stats.count_rows("profiles")
    except Exception as e:
        logger.warning("Readiness: database unavailable: %s", e)
        database = "unavailable"

    sessions = "configured"
    try:
        container.session_codec
    except (RuntimeError, ValueError) as e:
        logger.warning("Readiness: sessions unavailable: %s", e)
        sessions = "unconfigured"

    ready = database == "connected" and sessions == "configured"
    body = ReadinessResponse(
        status="ready" if ready else "not_ready",
        database=database,
        sessions=sessions,
    )
    return JSONResponse(status_code=200 if ready else 503, content=body.model_dump())
