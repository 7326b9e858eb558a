"""
Health check endpoints.
Used for monitoring, deployment readiness checks, and basic connectivity tests.
"""

from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends, HTTPException

from voice2action.core.settings import settings
from voice2action.services.storage import IssueRepository, get_issue_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
def health_check():
    """
    Basic health check endpoint.
    Returns 200 if service is running.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/db")
def database_health(repository: IssueRepository = Depends(get_issue_repository)):
    """
    Storage connectivity check.
    Runs a lightweight read against the configured issue store.
    """
    try:
        info = repository.ping()
    except Exception as e:
        logger.error(f"❌ Storage health check failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=503,
            detail=f"Database connection failed: {str(e)}"
        )

    return {
        "status": "healthy",
        **info,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
