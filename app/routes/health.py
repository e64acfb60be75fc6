"""
Liveness and readiness probes for CivicTrack.

/health answers as long as the process is up. /health/db touches the
issues collection, the one every moderation view depends on.
"""

from datetime import datetime, timezone
import logging

from fastapi import APIRouter, HTTPException, status

from app.config.firebase import get_db
from app.core.settings import settings
from app.services.issue_service import ISSUES_COLLECTION

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("")
async def health_check():
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "storage_backend": settings.STORAGE_BACKEND,
        "timestamp": _now(),
    }


@router.get("/db")
def database_health():
    """
    Read at most one issue. Returns 503 when the store cannot be reached.
    """
    backend = "mock" if settings.USE_MOCK_DB else "firestore"
    try:
        sample = list(get_db().collection(ISSUES_COLLECTION).limit(1).stream())
    except Exception as e:
        logger.error(f"Issue store unreachable ({backend}): {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database connection failed",
        )

    return {
        "status": "healthy",
        "database": backend,
        "connected": True,
        "has_issues": bool(sample),
        "timestamp": _now(),
    }
