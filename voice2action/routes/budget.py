"""
Participatory budget endpoints.

Plans are integer allocations over Roads, Waste, Flooding, Health and
Education that always sum to the plan total. The needs signal is the issue
volume per category over the trailing window.
"""

from fastapi import APIRouter, Depends

from voice2action.models.budget import (
    AutoAllocateRequest,
    RebalanceRequest,
    ResizeRequest,
    ScoreRequest,
)
from voice2action.services.budget_simulator import BudgetService, get_budget_service

router = APIRouter(prefix="/api/budget", tags=["Budget"])


@router.get("/needs")
def get_needs(service: BudgetService = Depends(get_budget_service)):
    """Observed needs per budget category (uniform when nothing matches)."""
    return {"ok": True, **service.needs().model_dump()}


@router.post("/rebalance")
def rebalance_plan(request: RebalanceRequest, service: BudgetService = Depends(get_budget_service)):
    """Set one category and renormalize the rest back to the total."""
    return {"ok": True, **service.rebalance(request).model_dump()}


@router.post("/auto-allocate")
def auto_allocate_plan(request: AutoAllocateRequest, service: BudgetService = Depends(get_budget_service)):
    return {"ok": True, **service.auto_allocate(request).model_dump()}


@router.post("/resize")
def resize_plan(request: ResizeRequest, service: BudgetService = Depends(get_budget_service)):
    """Change the total (minimum 10) and rescale the plan."""
    return {"ok": True, **service.resize(request).model_dump()}


@router.post("/score")
def score_plan(request: ScoreRequest, service: BudgetService = Depends(get_budget_service)):
    """Alignment score (0-100) of a plan against the needs."""
    return {"ok": True, **service.score(request).model_dump()}
