"""
Models for the participatory budget simulator.
"""

from pydantic import BaseModel, Field
from typing import Dict, Optional
from enum import Enum


class BudgetCategory(str, Enum):
    """
    Spending buckets, in their fixed order.

    Order matters: ROADS (first) absorbs every rounding residue.
    """
    ROADS = "Roads"
    WASTE = "Waste"
    FLOODING = "Flooding"
    HEALTH = "Health"
    EDUCATION = "Education"


class BudgetNeeds(BaseModel):
    window_days: int
    needs: Dict[str, int] = Field(..., description="Issue counts per budget category")
    percentages: Dict[str, float] = Field(..., description="Needs as percentages of their sum")
    uniform_fallback: bool = Field(False, description="True when no issue matched any category")


class RebalanceRequest(BaseModel):
    plan: Dict[str, int]
    category: BudgetCategory
    value: int = Field(..., ge=0)
    total: Optional[int] = Field(None, ge=1)


class ResizeRequest(BaseModel):
    plan: Dict[str, int]
    total: int


class AutoAllocateRequest(BaseModel):
    total: Optional[int] = Field(None, ge=1)
    needs: Optional[Dict[str, float]] = Field(None, description="Override needs (defaults to observed issues)")


class ScoreRequest(BaseModel):
    plan: Dict[str, int]
    total: Optional[int] = Field(None, ge=1)
    needs: Optional[Dict[str, float]] = None


class BudgetPlanResult(BaseModel):
    total: int
    plan: Dict[str, int]
    alignment_score: int = Field(..., ge=0, le=100)
    needs_scaled: Dict[str, int] = Field(default_factory=dict, description="Needs scaled to the plan total")
