"""
Document storage providers (Firestore or in-memory).
"""

from voice2action.services.storage.base import (
    IssueRepository,
    OrganizationRepository,
    ASCENDING,
    DESCENDING,
)
from voice2action.services.storage.memory_provider import (
    InMemoryIssueRepository,
    InMemoryOrganizationRepository,
)
from voice2action.services.storage.registry import get_issue_repository, get_organization_repository

__all__ = [
    "IssueRepository",
    "OrganizationRepository",
    "ASCENDING",
    "DESCENDING",
    "InMemoryIssueRepository",
    "InMemoryOrganizationRepository",
    "get_issue_repository",
    "get_organization_repository",
]
