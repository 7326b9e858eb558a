"""
Storage provider registry.

Returns the in-memory repositories when USE_MOCK_DB is set, Firestore
otherwise. Repositories are process-wide singletons.
"""

from typing import Optional
import logging

from voice2action.core.settings import settings
from voice2action.services.storage.base import IssueRepository, OrganizationRepository
from voice2action.services.storage.memory_provider import (
    InMemoryIssueRepository,
    InMemoryOrganizationRepository,
)

logger = logging.getLogger(__name__)

_issue_repository: Optional[IssueRepository] = None
_organization_repository: Optional[OrganizationRepository] = None


def get_issue_repository() -> IssueRepository:
    """Get or create the IssueRepository singleton."""
    global _issue_repository
    if _issue_repository is None:
        if settings.USE_MOCK_DB:
            logger.info("[STORAGE] USING IN-MEMORY ISSUE STORE")
            _issue_repository = InMemoryIssueRepository()
        else:
            from voice2action.services.storage.firestore_provider import FirestoreIssueRepository
            _issue_repository = FirestoreIssueRepository()
    return _issue_repository


def get_organization_repository() -> OrganizationRepository:
    """Get or create the OrganizationRepository singleton."""
    global _organization_repository
    if _organization_repository is None:
        if settings.USE_MOCK_DB:
            logger.info("[STORAGE] USING IN-MEMORY ORGANIZATION STORE")
            _organization_repository = InMemoryOrganizationRepository()
        else:
            from voice2action.services.storage.firestore_provider import FirestoreOrganizationRepository
            _organization_repository = FirestoreOrganizationRepository()
    return _organization_repository
