"""
Response models for the metrics / analytics endpoints.
"""

from pydantic import BaseModel, Field
from typing import List


class CategoryCount(BaseModel):
    category: str
    count: int


class MetricsSummary(BaseModel):
    """Scorecard for a set of issues (whole collection or one organization)."""
    total: int = 0
    resolved: int = 0
    resolve_rate: int = Field(default=0, ge=0, le=100, description="Percent of issues currently RESOLVED")
    avg_first_response_hours: int = 0
    avg_resolution_hours: int = 0
    categories: List[CategoryCount] = Field(default_factory=list)


class OrgMetricsSummary(MetricsSummary):
    org_code: str


class SeriesPoint(BaseModel):
    day: str = Field(..., description="UTC calendar day, YYYY-MM-DD")
    count: int


class SeriesResult(BaseModel):
    """Sparse daily counts: days without issues are absent, not zero."""
    days: int
    series: List[SeriesPoint] = Field(default_factory=list)
    categories: List[CategoryCount] = Field(default_factory=list)


class WardStat(BaseModel):
    ward_code: str
    total: int
    resolved: int
    open: int
