"""
Issue Aggregation Service

Decorates issues with the display name of whoever submitted them.

KEY PRINCIPLE:
- `emailid` is a soft reference; a missing account is normal, not an error
- Missing accounts resolve to "Anonymous User"
- One batched user lookup per listing, never one lookup per issue
- Names are read after the issue query, so a user edited or deleted in
  between may show a stale or anonymous name
"""

from typing import Dict, List, Optional

from app.models.issue import ANONYMOUS_USERNAME
from app.services.issue_service import IssueService, get_issue_service
from app.services.user_service import UserService, get_user_service
import logging

logger = logging.getLogger(__name__)


class IssueAggregationService:
    """Read views over issues with submitter names attached."""

    def __init__(
        self,
        issue_service: Optional[IssueService] = None,
        user_service: Optional[UserService] = None,
    ):
        self.issue_service = issue_service or get_issue_service()
        self.user_service = user_service or get_user_service()

    def attach_usernames(self, issues: List[Dict]) -> List[Dict]:
        names = self.user_service.get_names_by_email(issue.get("emailid") for issue in issues)
        decorated = []
        for issue in issues:
            decorated.append({
                **issue,
                "username": names.get(issue.get("emailid"), ANONYMOUS_USERNAME),
            })
        return decorated

    def get_all_issues(self) -> List[Dict]:
        return self.attach_usernames(self.issue_service.list_issues())

    def get_issues_by_status(self, status: str) -> List[Dict]:
        return self.attach_usernames(self.issue_service.list_issues(status=status))

    def get_issues_by_user(self, emailid: str, status: Optional[str] = None) -> List[Dict]:
        return self.attach_usernames(self.issue_service.list_issues(status=status, emailid=emailid))


# Global service instance
_aggregation_service = None


def get_issue_aggregation_service() -> IssueAggregationService:
    """Get or create IssueAggregationService singleton."""
    global _aggregation_service
    if _aggregation_service is None:
        _aggregation_service = IssueAggregationService()
    return _aggregation_service
