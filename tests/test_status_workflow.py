import pytest

from voice2action.core.errors import InvalidStateError
from voice2action.models.issue import AdminIssueUpdate, IssueStatus
from voice2action.services.status_workflow import StatusWorkflowEngine

from conftest import START


def _received():
    return {"id": "doc1", "status": "RECEIVED", "first_response_at": None, "resolved_at": None}


class TestTransitionChanges:
    def test_first_move_stamps_first_response(self):
        changes = StatusWorkflowEngine.transition_changes(_received(), IssueStatus.UNDER_REVIEW, START)
        assert changes == {"status": "UNDER_REVIEW", "first_response_at": START}

    def test_entering_resolved_sets_resolved_at(self):
        current = dict(_received(), status="IN_PROCESS", first_response_at=START)
        changes = StatusWorkflowEngine.transition_changes(current, IssueStatus.RESOLVED, START)
        assert changes == {"status": "RESOLVED", "resolved_at": START}

    def test_reopening_clears_resolved_at_and_keeps_first_response(self):
        current = dict(_received(), status="RESOLVED", first_response_at=START, resolved_at=START)
        changes = StatusWorkflowEngine.transition_changes(current, IssueStatus.RECEIVED, START)
        assert changes == {"status": "RECEIVED", "resolved_at": None}

    def test_same_status_changes_nothing(self):
        current = dict(_received(), status="RESOLVED", first_response_at=START, resolved_at=START)
        assert StatusWorkflowEngine.transition_changes(current, IssueStatus.RESOLVED, START) == {}

    def test_parse_status_rejects_unknown_values(self):
        with pytest.raises(InvalidStateError):
            StatusWorkflowEngine.parse_status("CLOSED")
        with pytest.raises(InvalidStateError):
            StatusWorkflowEngine.parse_status("in_process")
        assert StatusWorkflowEngine.parse_status("IN_PROCESS") == IssueStatus.IN_PROCESS

    def test_received_straight_to_resolved_stamps_both(self):
        changes = StatusWorkflowEngine.transition_changes(_received(), IssueStatus.RESOLVED, START)
        assert changes == {"status": "RESOLVED", "first_response_at": START, "resolved_at": START}


class TestBuildAdminUpdate:
    def test_invalid_status_is_ignored_but_notes_apply(self):
        result = StatusWorkflowEngine.build_admin_update(_received(), "DONE", "crew assigned", START)
        assert result["status_applied"] is False
        assert result["status_changed"] is False
        assert result["changes"] == {"admin_notes": "crew assigned", "updated_at": START}

    def test_nothing_to_do_writes_nothing(self):
        result = StatusWorkflowEngine.build_admin_update(_received(), "RECEIVED", None, START)
        assert result["status_applied"] is True
        assert result["changes"] == {}


class TestLifecycleThroughService:
    def test_full_lifecycle(self, report, issue_service, clock):
        issue = report()

        first = clock.advance(hours=2)
        issue_service.set_status(issue.id, "IN_PROCESS")

        resolved_time = clock.advance(hours=5)
        resolved = issue_service.set_status(issue.id, "RESOLVED")
        assert resolved.resolved_at == resolved_time
        assert resolved.first_response_at == first

        clock.advance(hours=1)
        reopened = issue_service.set_status(issue.id, "UNDER_REVIEW")
        assert reopened.status == IssueStatus.UNDER_REVIEW
        assert reopened.first_response_at == first
        assert reopened.resolved_at is None

    def test_resolving_a_new_issue_directly(self, report, issue_service, clock):
        issue = report()
        now = clock.advance(hours=6)

        resolved = issue_service.set_status(issue.id, "RESOLVED")
        assert resolved.first_response_at == now
        assert resolved.resolved_at == now

        clock.advance(hours=1)
        reopened = issue_service.set_status(issue.id, "RECEIVED")
        assert reopened.first_response_at == now
        assert reopened.resolved_at is None

    def test_setting_current_status_is_idempotent(self, report, issue_service, clock):
        issue = report()
        clock.advance(hours=1)
        resolved = issue_service.set_status(issue.id, "RESOLVED")

        clock.advance(hours=3)
        result = issue_service.update_issue(issue.id, AdminIssueUpdate(status="RESOLVED"))
        assert result["status_changed"] is False
        assert result["issue"].first_response_at == resolved.first_response_at
        assert result["issue"].resolved_at == resolved.resolved_at
        assert result["issue"].updated_at == resolved.updated_at

    def test_notes_only_update(self, report, issue_service):
        issue = report()
        updated = issue_service.set_notes(issue.id, "Inspection scheduled")
        assert updated.admin_notes == "Inspection scheduled"
        assert updated.status == IssueStatus.RECEIVED
        assert updated.first_response_at is None

    def test_invalid_status_leaves_status_untouched(self, report, issue_service):
        issue = report()
        result = issue_service.update_issue(
            issue.id, AdminIssueUpdate(status="ARCHIVED", admin_notes="duplicate?")
        )
        assert result["status_applied"] is False
        assert result["issue"].status == IssueStatus.RECEIVED
        assert result["issue"].admin_notes == "duplicate?"
