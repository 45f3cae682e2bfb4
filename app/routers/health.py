# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# None of these require authentication.
# =============================================================================

import logging

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from lib.supabase_client import SupabaseClient
from lib.utils import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter()

API_VERSION = "1.0.0"


# =============================================================================
# Response Models
# =============================================================================

class ChecksResponse(BaseModel):
    """Individual dependency checks."""
    database: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    environment: str
    timestamp: str
    checks: ChecksResponse


class ProbeResponse(BaseModel):
    """Readiness / liveness probe response."""
    status: str
    timestamp: str


def _check_database() -> str:
    try:
        SupabaseClient.get_client().table("users").select("id").limit(1).execute()
    except Exception as e:
        logger.warning(f"Health check: database unreachable: {e}")
        return "unhealthy"
    return "healthy"


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Reports "degraded" when the document store can't be reached.
    """
    checks = ChecksResponse(database=_check_database())
    return HealthResponse(
        status="healthy" if checks.database == "healthy" else "degraded",
        version=API_VERSION,
        environment=settings.ENVIRONMENT,
        timestamp=utc_now_iso(),
        checks=checks,
    )


@router.get("/health/ready", response_model=ProbeResponse)
async def readiness_check():
    """Ready once the document store answers."""
    ready = _check_database() == "healthy"
    return ProbeResponse(status="ready" if ready else "degraded", timestamp=utc_now_iso())


@router.get("/health/live", response_model=ProbeResponse)
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    """
    return ProbeResponse(status="alive", timestamp=utc_now_iso())
