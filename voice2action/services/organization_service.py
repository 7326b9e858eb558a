"""
Organization Service - lazily registered local government bodies.
"""

from datetime import datetime
from typing import Callable, List, Optional
import logging

from voice2action.core.errors import NotFoundError
from voice2action.models.metrics import OrgMetricsSummary
from voice2action.models.organization import Organization
from voice2action.services.metrics_service import MetricsService, get_metrics_service
from voice2action.services.storage import OrganizationRepository, get_organization_repository
from voice2action.utils.timestamps import utc_now

logger = logging.getLogger(__name__)


class OrganizationService:
    """Service for organizations and their scorecards."""

    def __init__(
        self,
        repository: Optional[OrganizationRepository] = None,
        metrics_service: Optional[MetricsService] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        self.repository = repository or get_organization_repository()
        self._metrics_service = metrics_service
        self.clock = clock

    @property
    def metrics_service(self) -> MetricsService:
        if self._metrics_service is None:
            self._metrics_service = get_metrics_service()
        return self._metrics_service

    def ensure_exists(self, code: str) -> bool:
        """
        Register ``code`` with placeholder name/type unless it already exists.

        Existing organizations are never overwritten.

        Returns:
            True if a new organization was created
        """
        org = Organization.placeholder(code, self.clock())
        created = self.repository.insert_if_absent(code, org.to_document())
        if created:
            logger.info(f"✅ Registered new organization {code}")
        return created

    def list_organizations(self) -> List[Organization]:
        return [Organization.from_document(doc["code"], doc) for doc in self.repository.list_all()]

    def get_organization(self, code: str) -> Organization:
        doc = self.repository.get(code)
        if doc is None:
            raise NotFoundError("Organization", code)
        return Organization.from_document(code, doc)

    def org_metrics(self, code: str) -> OrgMetricsSummary:
        """Scorecard scoped to one organization (404 for unknown codes)."""
        self.get_organization(code)
        summary = self.metrics_service.metrics(org_code=code)
        return OrgMetricsSummary(org_code=code, **summary.model_dump())


# Global service instance
_organization_service = None


def get_organization_service() -> OrganizationService:
    """Get or create OrganizationService singleton."""
    global _organization_service
    if _organization_service is None:
        _organization_service = OrganizationService()
    return _organization_service
