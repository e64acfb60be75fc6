"""
Status Workflow Engine - moderation lifecycle of an issue.

Two modes:
- permissive (default): any of the three statuses may be written over any
  other, last writer wins
- strict: pending is the only initial state, accepted/rejected are reached
  only from pending and nothing leaves them

Values outside the three statuses are rejected in both modes.
"""

from typing import Dict, List

from app.core.errors import ValidationError
from app.models.issue import IssueStatus
import logging

logger = logging.getLogger(__name__)


class StatusWorkflowEngine:
    """
    State machine for issue status transitions.
    """

    INITIAL_STATUS = IssueStatus.PENDING

    # Allowed transitions map for strict mode: {from_status: [to_status, ...]}
    ALLOWED_TRANSITIONS: Dict[IssueStatus, List[IssueStatus]] = {
        IssueStatus.PENDING: [IssueStatus.ACCEPTED, IssueStatus.REJECTED],
        IssueStatus.ACCEPTED: [],  # Terminal
        IssueStatus.REJECTED: [],  # Terminal
    }

    def __init__(self, strict: bool = False):
        self.strict = strict

    @staticmethod
    def parse_status(value: str) -> IssueStatus:
        try:
            return IssueStatus(value)
        except ValueError:
            allowed = ", ".join(s.value for s in IssueStatus)
            raise ValidationError(f"Invalid status '{value}'. Expected one of: {allowed}")

    @classmethod
    def is_valid_transition(cls, from_status: str, to_status: str) -> bool:
        """
        Check a transition against the strict table.
        Same status is always valid (no-op).
        """
        try:
            from_enum = IssueStatus(from_status)
            to_enum = IssueStatus(to_status)
        except ValueError:
            return False

        if from_enum == to_enum:
            return True
        return to_enum in cls.ALLOWED_TRANSITIONS.get(from_enum, [])

    @classmethod
    def get_allowed_transitions(cls, current_status: str) -> List[str]:
        try:
            current_enum = IssueStatus(current_status)
        except ValueError:
            return []
        return [status.value for status in cls.ALLOWED_TRANSITIONS.get(current_enum, [])]

    def validate_transition(self, current_status: str, new_status: str) -> IssueStatus:
        """
        Validate a requested transition and return the target status.

        Raises:
            ValidationError: unknown target, or (strict mode) unreachable target
        """
        target = self.parse_status(new_status)

        if self.strict and not self.is_valid_transition(current_status, target.value):
            allowed = self.get_allowed_transitions(current_status)
            raise ValidationError(
                f"Invalid status transition: {current_status} → {target.value}. "
                f"Allowed transitions from {current_status}: {allowed}"
            )

        if current_status != target.value:
            logger.info(f"Status transition {current_status} → {target.value} (strict={self.strict})")
        return target
