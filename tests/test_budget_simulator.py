from datetime import timedelta

import pytest

from voice2action.core.errors import ValidationError
from voice2action.models.budget import AutoAllocateRequest, ResizeRequest, ScoreRequest
from voice2action.services.budget_simulator import (
    absorb_residue,
    alignment_score,
    auto_allocate,
    bucket_needs,
    normalize_plan,
    rebalance,
    resize_total,
)

from conftest import START

EVEN = {"Roads": 20, "Waste": 20, "Flooding": 20, "Health": 20, "Education": 20}


class TestRebalance:
    def test_residue_goes_to_roads(self):
        plan = rebalance(EVEN, "Waste", 30, 100)
        # 20 * 100/110 rounds to 18, 30 * 100/110 to 27; the missing 1 lands on Roads
        assert plan == {"Roads": 19, "Waste": 27, "Flooding": 18, "Health": 18, "Education": 18}
        assert sum(plan.values()) == 100

    @pytest.mark.parametrize("category, value", [
        ("Roads", 0), ("Waste", 7), ("Flooding", 33), ("Health", 99), ("Education", 100),
    ])
    def test_plan_always_sums_to_total(self, category, value):
        plan = rebalance(EVEN, category, value, 100)
        assert sum(plan.values()) == 100
        assert all(v >= 0 for v in plan.values())

    def test_unchanged_sum_returns_plan_as_is(self):
        assert rebalance(EVEN, "Roads", 20, 100) == EVEN

    def test_value_is_clamped_to_total(self):
        plan = rebalance(EVEN, "Health", 500, 100)
        assert sum(plan.values()) == 100
        # Treated as 100 before renormalizing: 100 * 100/180 rounds to 56
        assert plan["Health"] == 56

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            rebalance(EVEN, "Parks", 10, 100)


class TestResidue:
    def test_roads_never_goes_negative(self):
        # Waste 50 + three 17s overshoot 100 by 1 while Roads is already 0
        plan, total = resize_total({"Roads": 0, "Waste": 3, "Flooding": 1, "Health": 1, "Education": 1}, 100)
        assert total == 100
        assert plan == {"Roads": 0, "Waste": 49, "Flooding": 17, "Health": 17, "Education": 17}

    def test_absorb_positive_residue(self):
        values = {"Roads": 10, "Waste": 30, "Flooding": 30, "Health": 20, "Education": 9}
        assert absorb_residue(values, 100)["Roads"] == 11


class TestAutoAllocateAndResize:
    def test_auto_allocate_follows_needs(self):
        needs = {"Roads": 1, "Waste": 1, "Flooding": 1, "Health": 0, "Education": 0}
        assert auto_allocate(needs, 100) == {"Roads": 34, "Waste": 33, "Flooding": 33, "Health": 0, "Education": 0}

    def test_resize_scales_plan(self):
        plan, total = resize_total(EVEN, 50)
        assert total == 50
        assert plan == {c: 10 for c in EVEN}

    def test_resize_enforces_minimum_total(self):
        plan, total = resize_total(EVEN, 3)
        assert total == 10
        assert plan == {c: 2 for c in EVEN}


class TestAlignment:
    def test_identical_distributions_score_100(self):
        needs = {"Roads": 4, "Waste": 4, "Flooding": 4, "Health": 4, "Education": 4}
        assert alignment_score(EVEN, needs, 100) == 100

    def test_disjoint_distributions_score_0(self):
        plan = {"Roads": 100, "Waste": 0, "Flooding": 0, "Health": 0, "Education": 0}
        needs = {"Roads": 0, "Waste": 0, "Flooding": 0, "Health": 0, "Education": 5}
        assert alignment_score(plan, needs, 100) == 0

    def test_partial_overlap(self):
        plan = {"Roads": 50, "Waste": 50, "Flooding": 0, "Health": 0, "Education": 0}
        needs = {"Roads": 1, "Waste": 0, "Flooding": 0, "Health": 0, "Education": 0}
        assert alignment_score(plan, needs, 100) == 50


class TestNeeds:
    def test_bucket_by_label_substring(self):
        needs, uniform = bucket_needs({"Roads": 3, "Flood drainage": 2, "General": 9})
        assert uniform is False
        assert needs == {"Roads": 3, "Waste": 0, "Flooding": 2, "Health": 0, "Education": 0}

    def test_uniform_fallback_when_nothing_matches(self):
        needs, uniform = bucket_needs({"General": 4})
        assert uniform is True
        assert set(needs.values()) == {20}

    def test_plan_validation(self):
        assert normalize_plan({"Roads": 5}) == {"Roads": 5, "Waste": 0, "Flooding": 0, "Health": 0, "Education": 0}
        with pytest.raises(ValidationError):
            normalize_plan({"Parks": 5})
        with pytest.raises(ValidationError):
            normalize_plan({"Roads": -1})


class TestBudgetService:
    def test_needs_come_from_the_trailing_window(self, budget_service, seed_issue):
        seed_issue(category="Roads", created_at=START - timedelta(days=3))
        seed_issue(category="Roads", created_at=START - timedelta(days=10))
        seed_issue(category="Health", created_at=START - timedelta(days=59))
        seed_issue(category="Waste", created_at=START - timedelta(days=61))

        result = budget_service.needs()
        assert result.window_days == 60
        assert result.needs == {"Roads": 2, "Waste": 0, "Flooding": 0, "Health": 1, "Education": 0}
        assert result.uniform_fallback is False

    def test_empty_store_uses_uniform_needs(self, budget_service):
        assert budget_service.needs().uniform_fallback is True

    def test_auto_allocate_with_observed_needs(self, budget_service, seed_issue):
        seed_issue(category="Education", created_at=START - timedelta(days=1))
        result = budget_service.auto_allocate(AutoAllocateRequest())
        assert result.total == 100
        assert result.plan["Education"] == 100
        assert result.alignment_score == 100

    def test_resize_request(self, budget_service):
        result = budget_service.resize(ResizeRequest(plan=EVEN, total=5))
        assert result.total == 10
        assert sum(result.plan.values()) == 10

    def test_score_rejects_plan_not_matching_total(self, budget_service):
        with pytest.raises(ValidationError):
            budget_service.score(ScoreRequest(plan={"Roads": 10}, total=100))

    def test_score_with_override_needs(self, budget_service):
        result = budget_service.score(ScoreRequest(plan=EVEN, needs={"Roads": 1}))
        assert result.alignment_score == 20
        assert result.needs_scaled["Roads"] == 100
