"""
Moderation Service - submission, status changes and user purges.

DESIGN PRINCIPLES:
- Evidence is stored before the issue is written; a failed upload leaves
  no issue behind
- New issues are always pending, whatever the client sent
- Status changes are validated by StatusWorkflowEngine
- Deleting a user is two independent steps (user, then their issues);
  a failure in the second step is reported, never retried
"""

from typing import Dict, Optional

from app.core.errors import NotFoundError, PartialDeletionError, PersistenceError, ValidationError
from app.core.settings import settings
from app.models.issue import IssueFields
from app.services.issue_service import IssueService, get_issue_service
from app.services.status_workflow import StatusWorkflowEngine
from app.services.storage import EvidenceStorage, get_evidence_storage
from app.services.user_service import UserService, get_user_service
import logging

logger = logging.getLogger(__name__)


class ModerationService:
    """
    Orchestrates the issue lifecycle across storage, issues and users.
    """

    def __init__(
        self,
        issue_service: Optional[IssueService] = None,
        user_service: Optional[UserService] = None,
        storage: Optional[EvidenceStorage] = None,
        workflow: Optional[StatusWorkflowEngine] = None,
    ):
        self.issue_service = issue_service or get_issue_service()
        self.user_service = user_service or get_user_service()
        self._storage = storage
        self.workflow = workflow or StatusWorkflowEngine(strict=settings.STRICT_STATUS_WORKFLOW)

    @property
    def storage(self) -> EvidenceStorage:
        if self._storage is None:
            self._storage = get_evidence_storage()
        return self._storage

    def submit_issue(self, fields: IssueFields, photo: Optional[bytes], filename: Optional[str]) -> Dict:
        """
        Store the evidence photo, then create a pending issue pointing at it.

        Raises:
            ValidationError: no file attached
            UploadError: the storage backend rejected the file
            PersistenceError: the issue could not be written (the photo is discarded)
        """
        if not photo or not filename:
            raise ValidationError("no file uploaded")

        photo_url = self.storage.store(photo, filename)
        logger.info(f"Evidence stored at {photo_url}")

        try:
            return self.issue_service.create_issue(fields, photo_url)
        except PersistenceError:
            self._discard_evidence(photo_url)
            raise

    def _discard_evidence(self, photo_url: str) -> None:
        try:
            self.storage.discard(photo_url)
        except Exception as e:
            logger.warning(f"Orphaned evidence left at {photo_url}: {e}")

    def change_status(self, issue_id: str, new_status: str) -> Dict:
        """
        Move an issue to a new status.

        Raises:
            NotFoundError: unknown issue id
            ValidationError: unknown status or (strict mode) disallowed transition
        """
        current = self.issue_service.get_issue(issue_id)
        if current is None:
            raise NotFoundError("Issue not found")

        target = self.workflow.validate_transition(current.get("status", "pending"), new_status)
        return self.issue_service.set_status(issue_id, target)

    def delete_user_and_issues(self, email: str) -> int:
        """
        Delete a user, then every issue submitted with their email.

        Returns:
            Number of issues removed

        Raises:
            NotFoundError: no such user (nothing is deleted)
            PartialDeletionError: user removed but issue deletion failed
        """
        if not self.user_service.delete_user(email):
            raise NotFoundError("User not found")

        try:
            return self.issue_service.delete_issues_by_email(email)
        except Exception as e:
            logger.error(f"User {email} deleted but their issues were not: {e}", exc_info=True)
            raise PartialDeletionError() from e


# Global service instance
_moderation_service = None


def get_moderation_service() -> ModerationService:
    """Get or create ModerationService singleton."""
    global _moderation_service
    if _moderation_service is None:
        _moderation_service = ModerationService()
    return _moderation_service
