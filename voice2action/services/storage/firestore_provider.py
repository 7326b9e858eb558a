"""
Firestore storage provider.

- Upvotes use a server-side Increment transform (no read-modify-write)
- Status/notes changes run in a Firestore transaction on one document
- Organizations are created with create(), which fails if the code exists

Composite indexes are required for the list endpoint's filter + order
combinations (status/category/org_code with created_at, upvotes or
sentiment_score); Firestore reports the index link on first use.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from firebase_admin import firestore
from google.api_core.exceptions import AlreadyExists, NotFound

from voice2action.config.firebase import get_db
from voice2action.core.settings import settings
from voice2action.services.storage.base import (
    IssueRepository,
    OrganizationRepository,
    Mutation,
    OrderBy,
)
from voice2action.utils.firestore_helpers import where_filter

logger = logging.getLogger(__name__)


def _snapshot_to_dict(doc, key: str = "id") -> Dict[str, Any]:
    data = doc.to_dict() or {}
    data[key] = doc.id
    return data


class FirestoreIssueRepository(IssueRepository):
    """Issue documents in the ``issues`` collection (auto-generated ids)."""

    def __init__(self, db=None, collection_name: Optional[str] = None):
        self.db = db if db is not None else get_db()
        self.collection = self.db.collection(collection_name or settings.ISSUES_COLLECTION)

    def insert(self, data: Dict[str, Any]) -> str:
        doc_ref = self.collection.document()  # Auto-generate unique ID
        try:
            doc_ref.set(data)
        except Exception as e:
            logger.error(f"Failed to save issue to Firestore: {e}", exc_info=True)
            raise
        return doc_ref.id

    def get(self, issue_id: str) -> Optional[Dict[str, Any]]:
        doc = self.collection.document(issue_id).get()
        if not doc.exists:
            return None
        return _snapshot_to_dict(doc)

    def find_by_tracking_id(self, tracking_id: str) -> Optional[Dict[str, Any]]:
        query = where_filter(self.collection, "tracking_id", "==", tracking_id).limit(1)
        for doc in query.stream():
            return _snapshot_to_dict(doc)
        return None

    def query(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
        created_since: Optional[datetime] = None
    ) -> List[Dict[str, Any]]:
        query = self.collection
        for field, value in (filters or {}).items():
            if value is not None:
                query = where_filter(query, field, "==", value)
        if created_since is not None:
            query = where_filter(query, "created_at", ">=", created_since)
        for field, direction in order_by or []:
            query = query.order_by(field, direction=direction)
        if limit:
            query = query.limit(limit)
        return [_snapshot_to_dict(doc) for doc in query.stream()]

    def increment(self, issue_id: str, field: str, amount: int = 1) -> Optional[int]:
        """
        Server-side Increment, then a plain read of the new value.

        The write itself never loses an upvote, but the returned count is
        read after the fact: concurrent upvotes may both report the same
        (latest) value.
        """
        doc_ref = self.collection.document(issue_id)
        try:
            doc_ref.update({field: firestore.Increment(amount)})
        except NotFound:
            return None
        snapshot = doc_ref.get()
        return (snapshot.to_dict() or {}).get(field)

    def update_atomic(self, issue_id: str, mutate: Mutation) -> Optional[Dict[str, Any]]:
        doc_ref = self.collection.document(issue_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def _apply(transaction):
            snapshot = doc_ref.get(transaction=transaction)
            if not snapshot.exists:
                return None
            current = _snapshot_to_dict(snapshot)
            changes = mutate(dict(current))
            if changes:
                transaction.update(doc_ref, changes)
            current.update(changes)
            return current

        return _apply(transaction)

    def ping(self) -> Dict[str, Any]:
        collections = list(self.db.collections())
        return {"database": "firestore", "connected": True, "collections_count": len(collections)}


class FirestoreOrganizationRepository(OrganizationRepository):
    """Organization documents keyed by org code."""

    def __init__(self, db=None, collection_name: Optional[str] = None):
        self.db = db if db is not None else get_db()
        self.collection = self.db.collection(collection_name or settings.ORGS_COLLECTION)

    def insert_if_absent(self, code: str, data: Dict[str, Any]) -> bool:
        try:
            self.collection.document(code).create(data)
        except AlreadyExists:
            return False
        return True

    def get(self, code: str) -> Optional[Dict[str, Any]]:
        doc = self.collection.document(code).get()
        if not doc.exists:
            return None
        return _snapshot_to_dict(doc, key="code")

    def list_all(self) -> List[Dict[str, Any]]:
        docs = self.collection.stream()
        return sorted((_snapshot_to_dict(doc, key="code") for doc in docs), key=lambda o: o["code"])
