# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# /health       - process is up, reports environment and version
# /health/ready - campgrounds table answers and the upload dir is writable
# /health/live  - liveness for container restarts
#
# None of these touch the session, so they never create a cookie.
# =============================================================================

import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from core.services.campground_service import CAMPGROUNDS_TABLE
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()

VERSION = "1.0.0"
HEALTHY = "healthy"


class HealthStatus(BaseModel):
    status: str
    environment: str
    version: str
    timestamp: datetime


class ReadinessChecks(BaseModel):
    """Outcome per dependency; anything other than "healthy" is a reason."""
    store: str
    uploads: str


class ReadinessStatus(BaseModel):
    status: str
    checks: ReadinessChecks
    timestamp: datetime


class LivenessStatus(BaseModel):
    status: str
    timestamp: datetime


def _check_store() -> str:
    try:
        client = SupabaseClient.get_client()
        client.table(CAMPGROUNDS_TABLE).select("id").limit(1).execute()
    except Exception as e:
        logger.warning(f"Readiness: store check failed: {e}")
        return f"unhealthy: {str(e)[:50]}"
    return HEALTHY


def _check_uploads() -> str:
    upload_dir = Path(settings.UPLOAD_DIR)
    if not upload_dir.is_dir():
        return "unhealthy: upload directory missing"
    if not os.access(upload_dir, os.W_OK):
        return "unhealthy: upload directory not writable"
    return HEALTHY


@router.get("/health", response_model=HealthStatus)
async def health_check():
    return HealthStatus(
        status=HEALTHY,
        environment=settings.ENVIRONMENT,
        version=VERSION,
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/health/ready", response_model=ReadinessStatus)
async def readiness_check():
    """
    Whether the app can serve pages and accept uploads.

    Always answers 200; the body says "degraded" and names the failing
    check so load balancers and humans read the same thing.
    """
    checks = ReadinessChecks(store=_check_store(), uploads=_check_uploads())
    ready = checks.store == HEALTHY and checks.uploads == HEALTHY

    return ReadinessStatus(
        status="ready" if ready else "degraded",
        checks=checks,
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/health/live", response_model=LivenessStatus)
async def liveness_check():
    return LivenessStatus(status="alive", timestamp=datetime.now(timezone.utc))
