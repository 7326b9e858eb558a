"""
In-memory storage provider (USE_MOCK_DB=true and the test suite).

One lock per repository stands in for Firestore's single-document
atomicity: increments and transactional updates cannot interleave.
Documents are deep-copied on the way in and out so callers never share
state with the store.
"""

import copy
import threading
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from voice2action.services.storage.base import (
    IssueRepository,
    OrganizationRepository,
    DESCENDING,
    Mutation,
    OrderBy,
)
from voice2action.utils.timestamps import parse_timestamp

logger = logging.getLogger(__name__)


class InMemoryIssueRepository(IssueRepository):

    def __init__(self):
        self._docs: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.RLock()

    def _copy_out(self, doc_id: str) -> Dict[str, Any]:
        data = copy.deepcopy(self._docs[doc_id])
        data["id"] = doc_id
        return data

    def insert(self, data: Dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex[:20]
        with self._lock:
            self._docs[doc_id] = copy.deepcopy({k: v for k, v in data.items() if k != "id"})
        return doc_id

    def get(self, issue_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            if issue_id not in self._docs:
                return None
            return self._copy_out(issue_id)

    def find_by_tracking_id(self, tracking_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            for doc_id, data in self._docs.items():
                if data.get("tracking_id") == tracking_id:
                    return self._copy_out(doc_id)
        return None

    def query(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
        created_since: Optional[datetime] = None
    ) -> List[Dict[str, Any]]:
        active = {k: v for k, v in (filters or {}).items() if v is not None}
        since = parse_timestamp(created_since)
        with self._lock:
            rows = [self._copy_out(doc_id) for doc_id in self._docs]

        rows = [r for r in rows if all(r.get(k) == v for k, v in active.items())]
        if since is not None:
            rows = [r for r in rows if parse_timestamp(r.get("created_at")) >= since]

        # Stable sorts applied from the last key to the first
        for field, direction in reversed(order_by or []):
            rows.sort(key=lambda r: r.get(field), reverse=(direction == DESCENDING))

        if limit:
            rows = rows[:limit]
        return rows

    def increment(self, issue_id: str, field: str, amount: int = 1) -> Optional[int]:
        with self._lock:
            doc = self._docs.get(issue_id)
            if doc is None:
                return None
            doc[field] = (doc.get(field) or 0) + amount
            return doc[field]

    def update_atomic(self, issue_id: str, mutate: Mutation) -> Optional[Dict[str, Any]]:
        with self._lock:
            if issue_id not in self._docs:
                return None
            current = self._copy_out(issue_id)
            changes = mutate(copy.deepcopy(current))
            if changes:
                self._docs[issue_id].update(copy.deepcopy(changes))
            return self._copy_out(issue_id)

    def ping(self) -> Dict[str, Any]:
        with self._lock:
            count = len(self._docs)
        return {"database": "memory", "connected": True, "documents_count": count}


class InMemoryOrganizationRepository(OrganizationRepository):

    def __init__(self):
        self._docs: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def insert_if_absent(self, code: str, data: Dict[str, Any]) -> bool:
        with self._lock:
            if code in self._docs:
                return False
            self._docs[code] = copy.deepcopy(data)
            return True

    def get(self, code: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            if code not in self._docs:
                return None
            return dict(copy.deepcopy(self._docs[code]), code=code)

    def list_all(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [dict(copy.deepcopy(self._docs[code]), code=code) for code in sorted(self._docs)]
