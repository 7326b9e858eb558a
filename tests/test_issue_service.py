import pytest

from voice2action.core.errors import NotFoundError, ValidationError
from voice2action.core.settings import settings
from voice2action.models.issue import IssueCreate, IssueStatus, SortMode
from voice2action.services import issue_service as issue_service_module
from voice2action.services.issue_service import IssueService
from voice2action.services.sentiment import MockUrgencyScorer


class RecordingScorer(MockUrgencyScorer):
    def __init__(self):
        super().__init__()
        self.calls = []

    def score(self, text):
        self.calls.append(text)
        return super().score(text)


class TestCreateIssue:
    def test_new_issue_defaults(self, report, clock):
        issue = report(title="Dangerous pothole", description="Broken road near the school")

        assert len(issue.tracking_id) == 8
        assert issue.tracking_id == issue.tracking_id.upper()
        assert issue.status == IssueStatus.RECEIVED
        assert issue.upvotes == 0
        assert issue.category == "Roads"
        assert issue.sentiment_score == -5
        assert issue.created_at == clock()
        assert issue.first_response_at is None
        assert issue.resolved_at is None

    def test_explicit_category_wins(self, report):
        assert report(category="Electricity").category == "Electricity"

    @pytest.mark.parametrize("title, description", [("", "something"), ("Title", "   "), (None, "x")])
    def test_blank_title_or_description_rejected_before_scoring(
        self, issue_repo, org_service, clock, title, description
    ):
        scorer = RecordingScorer()
        service = IssueService(repository=issue_repo, scorer=scorer, organization_service=org_service, clock=clock)

        with pytest.raises(ValidationError):
            service.create_issue(IssueCreate(title=title, description=description))
        assert scorer.calls == []
        assert issue_repo.query() == []

    def test_org_code_defaults_to_ward_code_and_is_registered(self, report, org_service):
        issue = report(ward_code="W-12")
        assert issue.org_code == "W-12"

        org = org_service.get_organization("W-12")
        assert org.name == "W-12"
        assert org.type.value == "Other"

    def test_existing_org_is_never_overwritten(self, report, org_repo, org_service):
        org_repo.insert_if_absent("DNCC", {"name": "Dhaka North", "type": "CityCorp", "created_at": None})
        report(org_code="DNCC")
        report(ward_code="W-1", org_code="DNCC")

        assert org_service.get_organization("DNCC").name == "Dhaka North"
        assert [o.code for o in org_service.list_organizations()] == ["DNCC"]

    def test_no_codes_leaves_org_unset(self, report, org_service):
        issue = report(ward_code="  ", org_code="")
        assert issue.ward_code is None
        assert issue.org_code is None
        assert org_service.list_organizations() == []

    def test_tracking_id_collision_is_regenerated(self, report, monkeypatch):
        ids = iter(["AAAA1111", "AAAA1111", "BBBB2222"])
        monkeypatch.setattr(issue_service_module, "make_tracking_id", lambda: next(ids))

        assert report().tracking_id == "AAAA1111"
        assert report().tracking_id == "BBBB2222"


class TestLookup:
    def test_track_by_tracking_id(self, report, issue_service):
        issue = report()
        assert issue_service.get_by_tracking_id(issue.tracking_id).id == issue.id
        assert issue_service.get_by_tracking_id(issue.tracking_id.lower()).id == issue.id

    def test_unknown_tracking_id(self, issue_service):
        with pytest.raises(NotFoundError):
            issue_service.get_by_tracking_id("ZZZZZZZZ")

    def test_unknown_issue_id(self, issue_service):
        with pytest.raises(NotFoundError):
            issue_service.get_issue("missing")


class TestListIssues:
    def test_recent_is_newest_first(self, report, issue_service):
        first, second, third = report(), report(), report()
        ids = [i.id for i in issue_service.list_issues(sort=SortMode.RECENT)]
        assert ids == [third.id, second.id, first.id]

    def test_top_orders_by_upvotes_then_newest(self, report, issue_service):
        a, b, c = report(), report(), report()
        issue_service.upvote(a.id)
        issue_service.upvote(a.id)
        issue_service.upvote(b.id)

        ids = [i.id for i in issue_service.list_issues(sort=SortMode.TOP)]
        assert ids == [a.id, b.id, c.id]

    def test_urgent_orders_by_sentiment_then_newest(self, report, issue_service):
        calm = report(title="Bench", description="Thanks for the clean park")
        older_bad = report(title="Broken", description="pipe")
        newer_bad = report(title="Urgent", description="leak")
        worst = report(title="Dangerous", description="terrible accident spot")

        ids = [i.id for i in issue_service.list_issues(sort=SortMode.URGENT)]
        assert ids == [worst.id, newer_bad.id, older_bad.id, calm.id]

    def test_filters(self, report, issue_service):
        road = report(org_code="DNCC")
        report(title="Garbage", description="not collected", org_code="DSCC")
        issue_service.set_status(road.id, "IN_PROCESS")

        assert [i.id for i in issue_service.list_issues(status="IN_PROCESS")] == [road.id]
        assert [i.id for i in issue_service.list_issues(category="Roads")] == [road.id]
        assert [i.id for i in issue_service.list_issues(org_code="DNCC")] == [road.id]
        assert issue_service.list_issues(status="CLOSED") == []

    def test_limit_is_capped(self, report, issue_service, monkeypatch):
        for _ in range(4):
            report()
        monkeypatch.setattr(settings, "LIST_MAX_LIMIT", 3)

        assert len(issue_service.list_issues(limit=2)) == 2
        assert len(issue_service.list_issues(limit=1000)) == 3

    def test_admin_list_has_full_records_newest_first(self, report, issue_service):
        first, second = report(citizen_contact="01700000000"), report()
        issues = issue_service.list_all_for_admin()
        assert [i.id for i in issues] == [second.id, first.id]
        assert issues[1].citizen_contact == "01700000000"


class TestUpvoteAndGeo:
    def test_upvote_counts_every_call(self, report, issue_service):
        issue = report()
        assert issue_service.upvote(issue.id) == 1
        assert issue_service.upvote(issue.id) == 2
        assert issue_service.get_issue(issue.id).upvotes == 2

    def test_upvote_unknown_issue(self, issue_service):
        with pytest.raises(NotFoundError):
            issue_service.upvote("missing")

    def test_update_unknown_issue(self, issue_service):
        with pytest.raises(NotFoundError):
            issue_service.set_status("missing", "RESOLVED")

    def test_geo_points_need_both_coordinates(self, report, issue_service):
        report(lat=23.81, lng=90.41)
        report(lat=23.70)
        report()

        points = issue_service.geo_points()
        assert [(p.lat, p.lng, p.weight) for p in points] == [(23.81, 90.41, 1)]
