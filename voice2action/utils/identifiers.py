"""
Identifier helpers: citizen-facing tracking ids and optional-text cleanup.
"""

import uuid
from typing import Optional

TRACKING_ID_LENGTH = 8


def make_tracking_id() -> str:
    """
    Generate an opaque 8-character tracking id (upper-case hex).

    IssueService regenerates the id if it is already taken.
    """
    return uuid.uuid4().hex[:TRACKING_ID_LENGTH].upper()


def clean_optional_text(value: Optional[str]) -> Optional[str]:
    """Strip text and collapse empty strings to None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None
