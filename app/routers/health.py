# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Liveness, readiness and a summary for monitoring. Readiness checks the
# artworks table, the image bucket and the gallery refresher.
# =============================================================================

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from app.dependencies import GalleryRefresherDep
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _unhealthy(check: str, e: Exception) -> str:
    logger.error(f"Readiness check {check} failed: {e}")
    return "unhealthy"


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str
    supabase_configured: bool


class ChecksResponse(BaseModel):
    """Result of each readiness check."""
    database: str = "unknown"
    storage: str = "unknown"
    gallery: str = "unknown"


class ReadinessResponse(BaseModel):
    status: str
    checks: ChecksResponse
    gallery_refreshed_at: datetime | None = None
    timestamp: str


class LivenessResponse(BaseModel):
    status: str
    timestamp: str


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Reports whether the backend connection is configured; does not call it.
    """
    return HealthResponse(
        status="healthy" if settings.supabase_configured else "misconfigured",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version="1.0.0",
        supabase_configured=settings.supabase_configured,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(refresher: GalleryRefresherDep):
    """
    Readiness check endpoint.

    - database: the artworks table answers a one-row select
    - storage: the image bucket can be listed
    - gallery: the background refresher has produced a listing
    """
    checks = ChecksResponse()

    try:
        client = SupabaseClient.get_client()
        client.table("artworks").select("id").limit(1).execute()
        checks.database = "healthy"
    except Exception as e:
        checks.database = _unhealthy("database", e)

    try:
        client = SupabaseClient.get_client()
        client.storage.from_(settings.STORAGE_BUCKET).list()
        checks.storage = "healthy"
    except Exception as e:
        checks.storage = _unhealthy("storage", e)

    refreshed_at = refresher.snapshot.refreshed_at
    if refreshed_at is not None:
        checks.gallery = "healthy"
    elif refresher.refresh_in_flight:
        checks.gallery = "refreshing"
    else:
        checks.gallery = "pending"

    backend_healthy = checks.database == "healthy" and checks.storage == "healthy"

    return ReadinessResponse(
        status="ready" if backend_healthy else "degraded",
        checks=checks,
        gallery_refreshed_at=refreshed_at,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """Process is up and serving requests."""
    return LivenessResponse(status="alive", timestamp=_now())
