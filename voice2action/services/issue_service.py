"""
Issue service - business logic for citizen reports and admin actions.

Flow for a new report:
1. Validate title/description (before any classification or scoring)
2. Resolve category (explicit or keyword classifier)
3. Score urgency once; the score is never recomputed
4. Default org_code to ward_code and register the organization if new
5. Store the issue with status RECEIVED and a fresh tracking id

Admin status/notes changes go through StatusWorkflowEngine and are written
in one atomic update; upvotes are a server-side increment.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
import logging

from voice2action.core.errors import NotFoundError, ValidationError
from voice2action.core.settings import settings
from voice2action.models.issue import (
    AdminIssueUpdate,
    GeoPoint,
    Issue,
    IssueCreate,
    IssueListItem,
    IssueStatus,
    SortMode,
)
from voice2action.services.category_classifier import resolve_category
from voice2action.services.organization_service import OrganizationService, get_organization_service
from voice2action.services.sentiment import UrgencyScorer, get_urgency_scorer
from voice2action.services.status_workflow import StatusWorkflowEngine
from voice2action.services.storage import (
    ASCENDING,
    DESCENDING,
    IssueRepository,
    get_issue_repository,
)
from voice2action.utils.identifiers import clean_optional_text, make_tracking_id
from voice2action.utils.timestamps import utc_now

logger = logging.getLogger(__name__)


# Sort keys per list mode; created_at DESC is the final tie-break everywhere
SORT_ORDERS = {
    SortMode.RECENT: [("created_at", DESCENDING)],
    SortMode.TOP: [("upvotes", DESCENDING), ("created_at", DESCENDING)],
    SortMode.URGENT: [("sentiment_score", ASCENDING), ("created_at", DESCENDING)],
}

TRACKING_ID_ATTEMPTS = 5


class IssueService:
    """Service for creating, reading and updating issues."""

    def __init__(
        self,
        repository: Optional[IssueRepository] = None,
        scorer: Optional[UrgencyScorer] = None,
        organization_service: Optional[OrganizationService] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        self.repository = repository or get_issue_repository()
        self.scorer = scorer or get_urgency_scorer()
        self.organization_service = organization_service or get_organization_service()
        self.clock = clock

    def _new_tracking_id(self) -> str:
        """
        Random tracking id not yet used by any stored issue.

        The lookup and the later insert are separate steps, so two concurrent
        creates can still draw the same id (1 in 16**8 per pair).
        """
        for _ in range(TRACKING_ID_ATTEMPTS):
            tracking_id = make_tracking_id()
            if self.repository.find_by_tracking_id(tracking_id) is None:
                return tracking_id
            logger.warning(f"Tracking id collision on {tracking_id}, regenerating")
        raise RuntimeError("Could not allocate a unique tracking id")

    def create_issue(self, payload: IssueCreate) -> Issue:
        """
        Create a new issue from a citizen report.

        Raises:
            ValidationError: title or description missing/blank
        """
        title = clean_optional_text(payload.title)
        description = clean_optional_text(payload.description)
        if not title or not description:
            raise ValidationError("title and description required")

        category = resolve_category(payload.category, title, description)
        sentiment_score = self.scorer.score(f"{title} {description}")

        ward_code = clean_optional_text(payload.ward_code)
        org_code = clean_optional_text(payload.org_code) or ward_code
        if org_code:
            self.organization_service.ensure_exists(org_code)

        now = self.clock()
        issue_dict = {
            "tracking_id": self._new_tracking_id(),
            "title": title,
            "description": description,
            "category": category,
            "location_text": clean_optional_text(payload.location_text),
            "lat": payload.lat,
            "lng": payload.lng,
            "citizen_contact": clean_optional_text(payload.citizen_contact),
            "images": list(payload.images or []),
            "ward_code": ward_code,
            "org_code": org_code,
            "status": IssueStatus.RECEIVED.value,
            "admin_notes": None,
            "upvotes": 0,
            "sentiment_score": sentiment_score,
            "first_response_at": None,
            "resolved_at": None,
            "created_at": now,
            "updated_at": now,
        }

        issue_id = self.repository.insert(issue_dict)
        logger.info(
            f"Issue created: {issue_id} (tracking {issue_dict['tracking_id']}, "
            f"category={category}, sentiment={sentiment_score}, org={org_code})"
        )
        return Issue.from_document(issue_id, issue_dict)

    def get_by_tracking_id(self, tracking_id: str) -> Issue:
        key = (tracking_id or "").strip().upper()
        doc = self.repository.find_by_tracking_id(key) if key else None
        if doc is None:
            raise NotFoundError("Issue with tracking id", tracking_id)
        return Issue.from_document(doc["id"], doc)

    def get_issue(self, issue_id: str) -> Issue:
        doc = self.repository.get(issue_id)
        if doc is None:
            raise NotFoundError("Issue", issue_id)
        return Issue.from_document(issue_id, doc)

    def list_issues(
        self,
        sort: SortMode = SortMode.RECENT,
        limit: Optional[int] = None,
        status: Optional[str] = None,
        category: Optional[str] = None,
        org_code: Optional[str] = None
    ) -> List[IssueListItem]:
        """
        Public issue list.

        ``limit`` defaults to LIST_DEFAULT_LIMIT and is capped at
        LIST_MAX_LIMIT. Filters are exact matches; an unknown status simply
        matches nothing.
        """
        if limit is None:
            limit = settings.LIST_DEFAULT_LIMIT
        limit = max(1, min(int(limit), settings.LIST_MAX_LIMIT))

        docs = self.repository.query(
            filters={"status": status or None, "category": category or None, "org_code": org_code or None},
            order_by=SORT_ORDERS[SortMode(sort)],
            limit=limit,
        )
        return [IssueListItem.from_issue(Issue.from_document(doc["id"], doc)) for doc in docs]

    def list_all_for_admin(self) -> List[Issue]:
        """Every issue, newest first."""
        docs = self.repository.query(order_by=SORT_ORDERS[SortMode.RECENT])
        return [Issue.from_document(doc["id"], doc) for doc in docs]

    def upvote(self, issue_id: str) -> int:
        """
        Add one upvote. No de-duplication; repeat calls keep counting.

        Returns:
            The new upvote count
        """
        count = self.repository.increment(issue_id, "upvotes", 1)
        if count is None:
            raise NotFoundError("Issue", issue_id)
        return count

    def update_issue(self, issue_id: str, update: AdminIssueUpdate) -> Dict[str, Any]:
        """
        Apply an admin status and/or notes change atomically.

        An invalid status value leaves the status untouched while notes are
        still written.

        Returns:
            {"issue": Issue, "status_applied": bool, "status_changed": bool}
        """
        now = self.clock()
        outcome: Dict[str, Any] = {}

        def _mutate(current: Dict[str, Any]) -> Dict[str, Any]:
            result = StatusWorkflowEngine.build_admin_update(
                current, update.status, update.admin_notes, now
            )
            outcome.update(result)
            return result["changes"]

        updated = self.repository.update_atomic(issue_id, _mutate)
        if updated is None:
            raise NotFoundError("Issue", issue_id)

        if outcome.get("status_changed"):
            logger.info(f"✅ Issue {issue_id} status {outcome['from_status']} → {updated['status']}")

        return {
            "issue": Issue.from_document(issue_id, updated),
            "status_applied": outcome.get("status_applied", False),
            "status_changed": outcome.get("status_changed", False),
        }

    def set_status(self, issue_id: str, status: str) -> Issue:
        return self.update_issue(issue_id, AdminIssueUpdate(status=status))["issue"]

    def set_notes(self, issue_id: str, notes: str) -> Issue:
        return self.update_issue(issue_id, AdminIssueUpdate(admin_notes=notes))["issue"]

    def geo_points(self) -> List[GeoPoint]:
        """Heatmap points for issues with both coordinates set (weight 1 each)."""
        points = []
        for doc in self.repository.query():
            lat, lng = doc.get("lat"), doc.get("lng")
            if lat is None or lng is None:
                continue
            points.append(GeoPoint(lat=lat, lng=lng, weight=1))
        return points


# Global service instance
_issue_service = None


def get_issue_service() -> IssueService:
    """Get or create IssueService singleton."""
    global _issue_service
    if _issue_service is None:
        _issue_service = IssueService()
    return _issue_service
