"""
Storage provider interfaces.

The core never reads-modifies-writes across the network boundary: every
mutation is one atomic per-document operation (server-side increment or a
single transactional update). Implementations:

- FirestoreIssueRepository / FirestoreOrganizationRepository (production)
- InMemoryIssueRepository / InMemoryOrganizationRepository (USE_MOCK_DB, tests)
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

# Same literals as google.cloud.firestore.Query.ASCENDING / DESCENDING
ASCENDING = "ASCENDING"
DESCENDING = "DESCENDING"

OrderBy = List[Tuple[str, str]]
Mutation = Callable[[Dict[str, Any]], Dict[str, Any]]


class IssueRepository(ABC):
    """
    Issue document store.

    Documents are plain dicts; reads return a copy with the document id
    under ``"id"``.
    """

    @abstractmethod
    def insert(self, data: Dict[str, Any]) -> str:
        """Store a new document and return its generated id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, issue_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def find_by_tracking_id(self, tracking_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def query(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
        created_since: Optional[datetime] = None
    ) -> List[Dict[str, Any]]:
        """
        Equality-filtered, ordered, limited read.

        Args:
            filters: field -> value equality filters (None values are skipped)
            order_by: [(field, ASCENDING|DESCENDING), ...] applied in order
            limit: maximum number of documents
            created_since: only documents with created_at >= this instant
        """
        raise NotImplementedError

    @abstractmethod
    def increment(self, issue_id: str, field: str, amount: int = 1) -> Optional[int]:
        """Atomically add ``amount`` to ``field``; returns the new value or None if missing."""
        raise NotImplementedError

    @abstractmethod
    def update_atomic(self, issue_id: str, mutate: Mutation) -> Optional[Dict[str, Any]]:
        """
        Read-compute-write one document atomically.

        ``mutate`` receives the current document and returns the fields to
        write. Returns the updated document, or None if it does not exist.
        ``mutate`` may be called more than once if the store retries.
        """
        raise NotImplementedError

    @abstractmethod
    def ping(self) -> Dict[str, Any]:
        """Lightweight connectivity check for /health/db."""
        raise NotImplementedError


class OrganizationRepository(ABC):
    """Organization documents keyed by their code."""

    @abstractmethod
    def insert_if_absent(self, code: str, data: Dict[str, Any]) -> bool:
        """Create the document unless it exists; never overwrites. True if created."""
        raise NotImplementedError

    @abstractmethod
    def get(self, code: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> List[Dict[str, Any]]:
        """All organizations sorted by code; each dict carries ``"code"``."""
        raise NotImplementedError
