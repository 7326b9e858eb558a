"""
Analytics endpoints - public scorecard, daily series and ward breakdown.

Every response is computed from the store on request; nothing is cached.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from voice2action.services.metrics_service import MetricsService, get_metrics_service

router = APIRouter(prefix="/api", tags=["Analytics"])


@router.get("/metrics")
def get_metrics(
    org_code: Optional[str] = Query(None, description="Restrict to one organization"),
    service: MetricsService = Depends(get_metrics_service)
):
    """Totals, resolve rate, average response/resolution hours and categories."""
    return {"ok": True, **service.metrics(org_code=org_code).model_dump()}


@router.get("/analytics/series")
def get_series(
    days: Optional[int] = Query(None, description="Trailing window in days (default 30, max 365)"),
    service: MetricsService = Depends(get_metrics_service)
):
    """Sparse daily issue counts plus the category breakdown for the window."""
    return {"ok": True, **service.series(days).model_dump()}


@router.get("/wards/stats")
def get_ward_stats(service: MetricsService = Depends(get_metrics_service)):
    return {"ok": True, "stats": service.ward_stats()}
