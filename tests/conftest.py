"""
Shared pytest fixtures for the Voice2Action test suite.

Everything runs in-process against the in-memory repositories, the mock
urgency scorer and a clock the tests move by hand. No Firebase credentials
are needed.
"""

import os

os.environ.setdefault("USE_MOCK_DB", "true")
os.environ.setdefault("SENTIMENT_PROVIDER", "mock")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from voice2action.main import app
from voice2action.models.issue import IssueCreate
from voice2action.services.budget_simulator import BudgetService, get_budget_service
from voice2action.services.issue_service import IssueService, get_issue_service
from voice2action.services.metrics_service import MetricsService, get_metrics_service
from voice2action.services.organization_service import OrganizationService, get_organization_service
from voice2action.services.sentiment import MockUrgencyScorer
from voice2action.services.storage import (
    InMemoryIssueRepository,
    InMemoryOrganizationRepository,
    get_issue_repository,
)
from voice2action.utils.identifiers import make_tracking_id

START = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when a test advances it."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def issue_repo():
    return InMemoryIssueRepository()


@pytest.fixture
def org_repo():
    return InMemoryOrganizationRepository()


@pytest.fixture
def scorer():
    return MockUrgencyScorer()


@pytest.fixture
def metrics_service(issue_repo, clock):
    return MetricsService(repository=issue_repo, clock=clock)


@pytest.fixture
def org_service(org_repo, metrics_service, clock):
    return OrganizationService(repository=org_repo, metrics_service=metrics_service, clock=clock)


@pytest.fixture
def issue_service(issue_repo, scorer, org_service, clock):
    return IssueService(repository=issue_repo, scorer=scorer, organization_service=org_service, clock=clock)


@pytest.fixture
def budget_service(metrics_service):
    return BudgetService(metrics_service=metrics_service)


@pytest.fixture
def report(issue_service, clock):
    """Create an issue through the service, one minute after the previous one."""

    def _report(title="Pothole on the main road", description="Bikes keep falling", **fields):
        clock.advance(minutes=1)
        return issue_service.create_issue(IssueCreate(title=title, description=description, **fields))

    return _report


@pytest.fixture
def seed_issue(issue_repo, clock):
    """Insert a raw issue document with explicit timestamps (bypasses the service)."""

    def _seed(**fields):
        doc = {
            "tracking_id": make_tracking_id(),
            "title": "Seeded issue",
            "description": "Seeded for metrics",
            "category": "General",
            "status": "RECEIVED",
            "upvotes": 0,
            "sentiment_score": 0,
            "images": [],
            "ward_code": None,
            "org_code": None,
            "first_response_at": None,
            "resolved_at": None,
            "created_at": clock(),
            "updated_at": clock(),
        }
        doc.update(fields)
        return issue_repo.insert(doc)

    return _seed


@pytest.fixture
def client(issue_repo, issue_service, metrics_service, org_service, budget_service):
    """TestClient with every service dependency pointed at the in-memory fixtures."""
    app.dependency_overrides[get_issue_repository] = lambda: issue_repo
    app.dependency_overrides[get_issue_service] = lambda: issue_service
    app.dependency_overrides[get_metrics_service] = lambda: metrics_service
    app.dependency_overrides[get_organization_service] = lambda: org_service
    app.dependency_overrides[get_budget_service] = lambda: budget_service
    yield TestClient(app)
    app.dependency_overrides.clear()
