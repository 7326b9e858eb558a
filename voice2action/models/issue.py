"""
Pydantic models for citizen-reported issues.

The stored document is an explicit typed record: every optional field is
Optional[...] and empty strings are normalized to None on creation, so
"unset" has a single representation for ward/org codes.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional, List, Dict, Any
from enum import Enum

from voice2action.utils.timestamps import parse_timestamp


class Category(str, Enum):
    """Fixed category set assigned by the keyword classifier."""
    ROADS = "Roads"
    WASTE = "Waste"
    FLOODING = "Flooding"
    HEALTH = "Health"
    EDUCATION = "Education"
    GENERAL = "General"


class IssueStatus(str, Enum):
    """
    Issue lifecycle states.

    RECEIVED → UNDER_REVIEW → IN_PROCESS → RESOLVED is the usual path, but
    administrators may set any state from any other.
    """
    RECEIVED = "RECEIVED"
    UNDER_REVIEW = "UNDER_REVIEW"
    IN_PROCESS = "IN_PROCESS"
    RESOLVED = "RESOLVED"


class SortMode(str, Enum):
    RECENT = "recent"
    TOP = "top"
    URGENT = "urgent"


class IssueCreate(BaseModel):
    """
    Model for creating a new issue (incoming POST request).

    title/description are checked by IssueService rather than here so that
    a blank report is answered with a 400 validation error, before any
    classification or scoring runs.
    """
    title: Optional[str] = Field(None, max_length=300, description="Short summary")
    description: Optional[str] = Field(None, max_length=5000, description="What the citizen observed")
    category: Optional[str] = Field(None, max_length=100, description="Explicit category (classifier used when blank)")
    location_text: Optional[str] = Field(None, max_length=500)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    citizen_contact: Optional[str] = Field(None, max_length=200)
    images: Optional[List[str]] = Field(None, description="Image URLs from the upload adapter")
    ward_code: Optional[str] = Field(None, max_length=100)
    org_code: Optional[str] = Field(None, max_length=100)

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def _blank_coordinate(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Pothole near the bus stand",
                "description": "Deep pothole on the main road, bikes keep falling.",
                "location_text": "Station Road",
                "lat": 23.8103,
                "lng": 90.4125,
                "ward_code": "DNCC-W12",
            }
        }
        extra = "ignore"


class Issue(BaseModel):
    """Stored issue record (document id exposed as ``id``)."""
    id: str = Field(..., description="Document ID")
    tracking_id: str = Field(..., min_length=8, max_length=8)
    title: str
    description: str
    category: str = Category.GENERAL.value
    location_text: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    citizen_contact: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    ward_code: Optional[str] = None
    org_code: Optional[str] = None
    status: IssueStatus = IssueStatus.RECEIVED
    admin_notes: Optional[str] = None
    upvotes: int = Field(default=0, ge=0)
    sentiment_score: int = 0
    first_response_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator("first_response_at", "resolved_at", "created_at", "updated_at", mode="before")
    @classmethod
    def _utc(cls, value):
        return parse_timestamp(value) if value is not None else None

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Issue":
        return cls(id=doc_id, **{k: v for k, v in data.items() if k != "id"})


class IssueListItem(BaseModel):
    """Projection returned by the public list endpoint."""
    id: str
    tracking_id: str
    title: str
    category: str
    status: IssueStatus
    upvotes: int
    sentiment_score: int
    created_at: datetime
    org_code: Optional[str] = None
    ward_code: Optional[str] = None

    @classmethod
    def from_issue(cls, issue: Issue) -> "IssueListItem":
        return cls(**issue.model_dump(include=set(cls.model_fields)))


class AdminIssueUpdate(BaseModel):
    """
    Admin PATCH body.

    ``status`` is a plain string on purpose: a value outside IssueStatus is
    ignored for the status field while ``admin_notes`` still applies.
    """
    status: Optional[str] = Field(None, description="RECEIVED | UNDER_REVIEW | IN_PROCESS | RESOLVED")
    admin_notes: Optional[str] = Field(None, max_length=5000)


class GeoPoint(BaseModel):
    lat: float
    lng: float
    weight: int = 1
