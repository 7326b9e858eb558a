"""
Issue endpoints - citizen report submission, tracking, public list and upvotes.
"""

from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query, status

from voice2action.models.issue import IssueCreate, SortMode
from voice2action.services.issue_service import IssueService, get_issue_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/issues", tags=["Issues"])

LEGACY_URGENT_FLAGS = {"1", "true", "yes"}


@router.post("", status_code=status.HTTP_201_CREATED)
def submit_issue(payload: IssueCreate, service: IssueService = Depends(get_issue_service)):
    """
    Submit a new citizen report.

    This endpoint:
    1. Rejects blank title/description (400)
    2. Classifies the category and scores urgency
    3. Registers the org code if it is new
    4. Stores the issue as RECEIVED

    Returns the tracking id the citizen uses to follow the issue.
    """
    logger.info(f"📝 POST /api/issues - ward={payload.ward_code}, org={payload.org_code}")
    issue = service.create_issue(payload)
    return {"ok": True, "tracking_id": issue.tracking_id, "id": issue.id}


@router.get("/geo")
def issue_geo_points(service: IssueService = Depends(get_issue_service)):
    """Heatmap points for every issue with coordinates."""
    return {"ok": True, "points": service.geo_points()}


@router.get("/track/{tracking_id}")
def track_issue(tracking_id: str, service: IssueService = Depends(get_issue_service)):
    """Look up one issue by its 8-character tracking id (404 if unknown)."""
    return {"ok": True, "issue": service.get_by_tracking_id(tracking_id)}


@router.get("")
def list_issues(
    sort: SortMode = Query(SortMode.RECENT, description="recent | top | urgent"),
    limit: Optional[int] = Query(None, ge=1, description="Defaults to 50, capped at 200"),
    status: Optional[str] = Query(None, description="Exact status filter"),
    category: Optional[str] = Query(None, description="Exact category filter"),
    org_code: Optional[str] = Query(None, description="Exact organization filter"),
    urgent: Optional[str] = Query(None, description="Legacy flag: urgent=1 forces urgent ordering"),
    service: IssueService = Depends(get_issue_service)
):
    """
    Public issue list.

    - recent: newest first
    - top: most upvoted first, then newest
    - urgent: most negative sentiment first, then newest
    """
    if urgent is not None and urgent.strip().lower() in LEGACY_URGENT_FLAGS:
        sort = SortMode.URGENT

    issues = service.list_issues(
        sort=sort,
        limit=limit,
        status=status,
        category=category,
        org_code=org_code,
    )
    return {"ok": True, "issues": issues}


@router.post("/{issue_id}/upvote")
def upvote_issue(issue_id: str, service: IssueService = Depends(get_issue_service)):
    """Add one upvote (no per-user de-duplication)."""
    return {"ok": True, "id": issue_id, "upvotes": service.upvote(issue_id)}
