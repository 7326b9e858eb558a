"""
Participatory Budget Simulator - needs model, plan rebalancing, alignment.

All plan arithmetic is pure and deterministic:
- Values are rounded half-up
- The rounding residue (total minus the sum of rounded values) goes to the
  first category, Roads; if Roads would drop below 0 the remainder moves on
  to the next category in the fixed order
- A plan therefore always sums exactly to its total

BudgetService wires the pure functions to the Metrics Aggregator, whose
category breakdown over a trailing window is the needs signal.
"""

from collections import defaultdict
from typing import Dict, Iterable, Mapping, Optional, Tuple
import logging

from voice2action.core.errors import ValidationError
from voice2action.core.settings import settings
from voice2action.models.budget import (
    AutoAllocateRequest,
    BudgetCategory,
    BudgetNeeds,
    BudgetPlanResult,
    RebalanceRequest,
    ResizeRequest,
    ScoreRequest,
)
from voice2action.models.metrics import CategoryCount
from voice2action.services.metrics_service import MetricsService, get_metrics_service
from voice2action.utils.timestamps import round_half_up

logger = logging.getLogger(__name__)


BUDGET_CATEGORIES = [category.value for category in BudgetCategory]

# Category label substring -> budget bucket; first hit wins
NEEDS_KEYWORDS = [
    ("road", BudgetCategory.ROADS.value),
    ("waste", BudgetCategory.WASTE.value),
    ("flood", BudgetCategory.FLOODING.value),
    ("health", BudgetCategory.HEALTH.value),
    ("educ", BudgetCategory.EDUCATION.value),
]

UNIFORM_NEED = 20


def uniform_needs() -> Dict[str, int]:
    return {category: UNIFORM_NEED for category in BUDGET_CATEGORIES}


def bucket_for_label(label: Optional[str]) -> Optional[str]:
    lowered = (label or "").lower()
    for keyword, bucket in NEEDS_KEYWORDS:
        if keyword in lowered:
            return bucket
    return None


def bucket_needs(category_counts: Mapping[str, int]) -> Tuple[Dict[str, int], bool]:
    """
    Fold issue-category counts into the five budget buckets.

    Labels that match no bucket (e.g. "General") are dropped. When nothing
    matches, needs fall back to a uniform 20 per bucket.

    Returns:
        (needs, uniform_fallback)
    """
    needs = {category: 0 for category in BUDGET_CATEGORIES}
    for label, count in category_counts.items():
        bucket = bucket_for_label(label)
        if bucket is not None:
            needs[bucket] += count

    if sum(needs.values()) == 0:
        return uniform_needs(), True
    return needs, False


def needs_percentages(needs: Mapping[str, float]) -> Dict[str, float]:
    total_need = sum(needs.get(category, 0) for category in BUDGET_CATEGORIES)
    if not total_need:
        return {category: 0.0 for category in BUDGET_CATEGORIES}
    return {category: 100.0 * needs.get(category, 0) / total_need for category in BUDGET_CATEGORIES}


def absorb_residue(values: Dict[str, int], total: int) -> Dict[str, int]:
    """
    Push ``total - sum(values)`` into the first category (Roads).

    Each category stays within [0, total]; what Roads cannot take spills to
    the next category in order.
    """
    diff = total - sum(values[category] for category in BUDGET_CATEGORIES)
    for category in BUDGET_CATEGORIES:
        if diff == 0:
            break
        adjusted = min(max(values[category] + diff, 0), total)
        diff -= adjusted - values[category]
        values[category] = adjusted
    return values


def normalize_plan(plan: Mapping[str, int]) -> Dict[str, int]:
    """
    Validate a plan and fill missing categories with 0.

    Raises:
        ValidationError: unknown category or negative / non-integer value
    """
    unknown = [key for key in plan if key not in BUDGET_CATEGORIES]
    if unknown:
        raise ValidationError(f"Unknown budget categories: {unknown}. Expected {BUDGET_CATEGORIES}")

    normalized = {}
    for category in BUDGET_CATEGORIES:
        value = plan.get(category, 0)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError(f"Plan value for {category} must be a non-negative integer, got {value!r}")
        normalized[category] = value
    return normalized


def validate_total(total: int) -> int:
    if isinstance(total, bool) or not isinstance(total, int) or total < 1:
        raise ValidationError(f"Budget total must be a positive integer, got {total!r}")
    return total


def scale_plan(plan: Mapping[str, int], total: int) -> Dict[str, int]:
    """Scale a plan proportionally so it sums to ``total``."""
    current = sum(plan[category] for category in BUDGET_CATEGORIES)
    scale = total / (current or 1)
    scaled = {category: round_half_up(plan[category] * scale) for category in BUDGET_CATEGORIES}
    return absorb_residue(scaled, total)


def rebalance(plan: Mapping[str, int], category: str, value: int, total: int) -> Dict[str, int]:
    """
    Set one category's value, then renormalize the plan back to ``total``.

    If the edited plan already sums to ``total`` it is returned unchanged.
    """
    total = validate_total(total)
    if category not in BUDGET_CATEGORIES:
        raise ValidationError(f"Unknown budget category: {category}")

    edited = normalize_plan(plan)
    edited[category] = min(max(int(value), 0), total)

    if sum(edited.values()) == total:
        return edited
    return scale_plan(edited, total)


def auto_allocate(needs: Mapping[str, float], total: int) -> Dict[str, int]:
    """Plan directly proportional to the needs percentages."""
    total = validate_total(total)
    percentages = needs_percentages(needs)
    allocation = {category: round_half_up(total * percentages[category] / 100) for category in BUDGET_CATEGORIES}
    return absorb_residue(allocation, total)


def resize_total(plan: Mapping[str, int], new_total: int, min_total: int = 10) -> Tuple[Dict[str, int], int]:
    """
    Change the budget total (never below ``min_total``) and rescale the plan.

    Returns:
        (scaled plan, effective total)
    """
    if isinstance(new_total, bool) or not isinstance(new_total, int):
        raise ValidationError(f"Budget total must be an integer, got {new_total!r}")
    effective_total = max(min_total, new_total)
    return scale_plan(normalize_plan(plan), effective_total), effective_total


def alignment_score(plan: Mapping[str, int], needs: Mapping[str, float], total: int) -> int:
    """
    0-100 similarity between plan and needs distributions.

    100 * (1 - half the total variation distance between the two percentage
    distributions): identical distributions score 100, disjoint ones 0.
    """
    total = validate_total(total)
    need_pct = needs_percentages(needs)
    plan_pct = {category: 100.0 * plan.get(category, 0) / total for category in BUDGET_CATEGORIES}
    distance = sum(abs(plan_pct[c] - need_pct[c]) for c in BUDGET_CATEGORIES) / 100
    return min(100, max(0, round_half_up(100 * (1 - 0.5 * distance))))


def scaled_needs(needs: Mapping[str, float], total: int) -> Dict[str, int]:
    """Needs expressed in plan units, for planned-vs-needs charts (no residue fix)."""
    percentages = needs_percentages(needs)
    return {category: round_half_up(total * percentages[category] / 100) for category in BUDGET_CATEGORIES}


def counts_by_label(categories: Iterable[CategoryCount]) -> Dict[str, int]:
    merged: Dict[str, int] = defaultdict(int)
    for row in categories:
        merged[row.category or "General"] += row.count
    return dict(merged)


class BudgetService:
    """Budget simulator backed by observed issue volume."""

    def __init__(self, metrics_service: Optional[MetricsService] = None):
        self.metrics_service = metrics_service or get_metrics_service()

    def needs(self) -> BudgetNeeds:
        window = settings.BUDGET_NEEDS_WINDOW_DAYS
        series = self.metrics_service.series(window)
        needs, uniform = bucket_needs(counts_by_label(series.categories))
        if uniform:
            logger.info(f"No categorized issues in the last {window} days, using uniform needs")
        return BudgetNeeds(
            window_days=window,
            needs=needs,
            percentages=needs_percentages(needs),
            uniform_fallback=uniform,
        )

    def _resolve_needs(self, override: Optional[Mapping[str, float]]) -> Dict[str, float]:
        if override is None:
            return dict(self.needs().needs)
        unknown = [key for key in override if key not in BUDGET_CATEGORIES]
        if unknown:
            raise ValidationError(f"Unknown budget categories in needs: {unknown}")
        if any(value < 0 for value in override.values()):
            raise ValidationError("Needs values must be non-negative")
        if sum(override.values()) == 0:
            return dict(uniform_needs())
        return {category: override.get(category, 0) for category in BUDGET_CATEGORIES}

    def _result(self, plan: Dict[str, int], total: int, needs: Mapping[str, float]) -> BudgetPlanResult:
        return BudgetPlanResult(
            total=total,
            plan=plan,
            alignment_score=alignment_score(plan, needs, total),
            needs_scaled=scaled_needs(needs, total),
        )

    def rebalance(self, request: RebalanceRequest) -> BudgetPlanResult:
        total = request.total or settings.BUDGET_DEFAULT_TOTAL
        plan = rebalance(request.plan, request.category.value, request.value, total)
        return self._result(plan, total, self._resolve_needs(None))

    def auto_allocate(self, request: AutoAllocateRequest) -> BudgetPlanResult:
        total = request.total or settings.BUDGET_DEFAULT_TOTAL
        needs = self._resolve_needs(request.needs)
        return self._result(auto_allocate(needs, total), total, needs)

    def resize(self, request: ResizeRequest) -> BudgetPlanResult:
        plan, total = resize_total(request.plan, request.total, settings.BUDGET_MIN_TOTAL)
        return self._result(plan, total, self._resolve_needs(None))

    def score(self, request: ScoreRequest) -> BudgetPlanResult:
        total = request.total or settings.BUDGET_DEFAULT_TOTAL
        plan = normalize_plan(request.plan)
        if sum(plan.values()) != total:
            raise ValidationError(f"Plan must sum to {total}, got {sum(plan.values())}")
        return self._result(plan, total, self._resolve_needs(request.needs))


# Global service instance
_budget_service = None


def get_budget_service() -> BudgetService:
    """Get or create BudgetService singleton."""
    global _budget_service
    if _budget_service is None:
        _budget_service = BudgetService()
    return _budget_service
