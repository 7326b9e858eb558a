"""
Admin endpoints - issue lifecycle control.

SCOPE OF ADMIN:
✅ Move an issue to any status (forward or backward)
✅ Write admin notes visible on the tracking page

❌ NOT edit the citizen's report content
❌ NOT delete issues

Authentication is handled in front of this service.
"""

import logging

from fastapi import APIRouter, Depends

from voice2action.models.issue import AdminIssueUpdate
from voice2action.services.issue_service import IssueService, get_issue_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/issues")
def admin_list_issues(service: IssueService = Depends(get_issue_service)):
    """Every issue with full details, newest first."""
    return {"ok": True, "issues": service.list_all_for_admin()}


@router.patch("/issues/{issue_id}")
def update_issue(
    issue_id: str,
    request: AdminIssueUpdate,
    service: IssueService = Depends(get_issue_service)
):
    """
    Change status and/or admin notes in one atomic update.

    **Rules:**
    - Any status can follow any other
    - first_response_at is stamped on the first move away from RECEIVED
    - resolved_at is set on RESOLVED and cleared when reopened
    - An unknown status is ignored (status_applied=false); notes still apply
    """
    result = service.update_issue(issue_id, request)
    return {
        "ok": True,
        "issue": result["issue"],
        "status_applied": result["status_applied"],
        "status_changed": result["status_changed"],
    }
