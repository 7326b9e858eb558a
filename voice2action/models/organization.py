"""
Organization model - local government bodies that issues are scoped to.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional, Dict, Any
from enum import Enum

from voice2action.utils.timestamps import parse_timestamp


class OrgType(str, Enum):
    UNION_PARISHAD = "UP"
    POURASHAVA = "Pourashava"
    CITY_CORPORATION = "CityCorp"
    OTHER = "Other"


class Organization(BaseModel):
    code: str = Field(..., min_length=1, description="Unique org code (document ID)")
    name: str
    type: OrgType = OrgType.OTHER
    created_at: Optional[datetime] = None

    @field_validator("created_at", mode="before")
    @classmethod
    def _utc(cls, value):
        return parse_timestamp(value) if value is not None else None

    @classmethod
    def from_document(cls, code: str, data: Dict[str, Any]) -> "Organization":
        return cls(code=code, **{k: v for k, v in data.items() if k != "code"})

    @classmethod
    def placeholder(cls, code: str, created_at: datetime) -> "Organization":
        """Defaults used when an issue first references an unknown code."""
        return cls(code=code, name=code, type=OrgType.OTHER, created_at=created_at)

    def to_document(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.value,
            "created_at": self.created_at,
        }
