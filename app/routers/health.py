# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from app.dependencies import BackendDep
from core.backend import BackendError

router = APIRouter()

VERSION = "1.0.0"


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Individual service checks."""
    database: str
    storage: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.ENVIRONMENT,
        version=VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
def readiness_check(backend: BackendDep):
    """
    Readiness check endpoint.

    Checks that the notices table and the media bucket are reachable.
    """
    checks = ChecksResponse(database="unknown", storage="unknown")

    try:
        backend.rows.select("notices", columns="id", limit=1)
        checks.database = "healthy"
    except BackendError as e:
        checks.database = f"unhealthy: {e.message[:50]}"

    try:
        backend.files.list(settings.STORAGE_BUCKET, settings.GALLERY_FOLDER, limit=1)
        checks.storage = "healthy"
    except BackendError as e:
        checks.storage = f"unhealthy: {e.message[:50]}"

    all_healthy = checks.database == "healthy" and checks.storage == "healthy"

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=checks,
        timestamp=datetime.utcnow().isoformat(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    """
    return LivenessResponse(
        status="alive",
        timestamp=datetime.utcnow().isoformat(),
    )
