"""
Status Workflow Engine - issue lifecycle state machine.

DESIGN PRINCIPLES:
- Any state is reachable from any other (admins may move an issue backwards)
- first_response_at is stamped once, on the first move away from RECEIVED
- resolved_at is set on entering RESOLVED and cleared on leaving it
- Setting the current status again changes nothing
- Invalid status values are ignored for the status field, never fatal

The engine works on plain document dicts and returns the field changes to
write; the repository applies them in one atomic per-document update.
"""

from datetime import datetime
from typing import Any, Dict, Optional
import logging

from voice2action.core.errors import InvalidStateError
from voice2action.models.issue import IssueStatus

logger = logging.getLogger(__name__)


class StatusWorkflowEngine:
    """
    Lifecycle rules for issue status transitions.

    RECEIVED → UNDER_REVIEW → IN_PROCESS → RESOLVED is the usual path, but
    transitions are not restricted.
    """

    @classmethod
    def parse_status(cls, value: Any) -> IssueStatus:
        """
        Convert a raw status value to IssueStatus.

        Raises:
            InvalidStateError: value is not one of the four statuses
        """
        if isinstance(value, IssueStatus):
            return value
        try:
            return IssueStatus(value)
        except ValueError:
            raise InvalidStateError(value)

    @classmethod
    def transition_changes(
        cls,
        current: Dict[str, Any],
        new_status: IssueStatus,
        now: datetime
    ) -> Dict[str, Any]:
        """
        Field changes for moving ``current`` to ``new_status``.

        Args:
            current: Stored issue document (needs status, first_response_at)
            new_status: Target status
            now: Transition time

        Returns:
            Dict of fields to write (empty when the status is unchanged)
        """
        prev_status = cls.parse_status(current.get("status", IssueStatus.RECEIVED.value))
        if prev_status == new_status:
            return {}

        changes: Dict[str, Any] = {"status": new_status.value}

        if new_status != IssueStatus.RECEIVED and not current.get("first_response_at"):
            changes["first_response_at"] = now

        if new_status == IssueStatus.RESOLVED:
            changes["resolved_at"] = now
        elif prev_status == IssueStatus.RESOLVED:
            # Reopened; first_response_at is kept
            changes["resolved_at"] = None

        return changes

    @classmethod
    def build_admin_update(
        cls,
        current: Dict[str, Any],
        status: Optional[str],
        admin_notes: Optional[str],
        now: datetime
    ) -> Dict[str, Any]:
        """
        Combine a status request and a notes update into one change set.

        Returns:
            {
                "changes": fields to write (may be empty),
                "status_applied": True if ``status`` was a valid value,
                "status_changed": True if the status actually moved,
                "from_status": previous status string,
            }
        """
        changes: Dict[str, Any] = {}
        status_applied = False
        from_status = current.get("status", IssueStatus.RECEIVED.value)

        if isinstance(admin_notes, str):
            changes["admin_notes"] = admin_notes

        if status:
            try:
                new_status = cls.parse_status(status)
            except InvalidStateError as e:
                logger.warning(f"Ignoring status change for issue {current.get('id')}: {e.message}")
            else:
                status_applied = True
                changes.update(cls.transition_changes(current, new_status, now))

        if changes:
            changes["updated_at"] = now

        return {
            "changes": changes,
            "status_applied": status_applied,
            "status_changed": "status" in changes,
            "from_status": from_status,
        }
