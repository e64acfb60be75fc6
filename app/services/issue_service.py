"""
Issue service - Firestore persistence for civic issues.

DESIGN NOTE:
- Issues live in the "issues" collection; the document id is the issue id.
- Ids come from app.utils.ids, so "most recent first" is descending id.
- `emailid` is stored as given and never checked against users.
- Status is only ever written through set_status().
"""

from firebase_admin import firestore
from google.api_core.exceptions import NotFound
from app.config.firebase import get_db
from app.core.errors import NotFoundError, PersistenceError, ValidationError
from app.models.issue import IssueFields, IssueStatus
from app.utils.firestore_helpers import snapshot_to_dict, where_filter
from app.utils.ids import new_issue_id
from datetime import datetime, timezone
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

ISSUES_COLLECTION = "issues"


def format_issue_date(moment: datetime) -> str:
    """Short calendar date as shown to users, e.g. 10/7/2026."""
    return f"{moment.month}/{moment.day}/{moment.year}"


class IssueService:
    """
    Service for issue records in Firestore.
    """

    def __init__(self):
        self.db = get_db()

    @property
    def issues_ref(self):
        return self.db.collection(ISSUES_COLLECTION)

    def create_issue(self, fields: IssueFields, photo_url: str) -> Dict:
        """
        Store a new issue in the pending state.

        Args:
            fields: Submitter-provided fields
            photo_url: URL returned by the evidence storage

        Returns:
            The stored issue as a dict

        Raises:
            ValidationError: no photo URL
            PersistenceError: the write failed (nothing is kept)
        """
        if not photo_url:
            raise ValidationError("no file uploaded")

        issue_id = new_issue_id()
        doc_ref = self.issues_ref.document(issue_id)
        issue_dict = {
            "id": issue_id,
            "photo": photo_url,
            "location": fields.location,
            "emailid": fields.emailid,
            "category": fields.category,
            "issue": fields.issue,
            "description": fields.description,
            "date": format_issue_date(datetime.now()),
            "status": IssueStatus.PENDING.value,
            "created_at": firestore.SERVER_TIMESTAMP,
        }

        try:
            doc_ref.set(issue_dict)
        except Exception as e:
            logger.error(f"Failed to save issue to Firestore: {e}", exc_info=True)
            raise PersistenceError("Failed to submit issue") from e

        logger.info(f"Issue saved to Firestore: {issue_id} (category={fields.category})")

        # Not re-read; the stored created_at is the server timestamp
        return {**issue_dict, "created_at": datetime.now(timezone.utc)}

    def get_issue(self, issue_id: str) -> Optional[Dict]:
        doc = self.issues_ref.document(issue_id).get()
        if not doc.exists:
            return None
        return snapshot_to_dict(doc)

    def list_issues(self, status: Optional[str] = None, emailid: Optional[str] = None) -> List[Dict]:
        """
        Fetch issues, most recent first.

        Args:
            status: Only issues with this status
            emailid: Only issues submitted with this email
        """
        query = self.issues_ref
        if status:
            query = where_filter(query, "status", "==", status)
        if emailid:
            query = where_filter(query, "emailid", "==", emailid)

        issues = [snapshot_to_dict(doc) for doc in query.stream()]

        # Sorted here rather than with order_by to avoid composite indexes
        issues.sort(key=lambda issue: issue["id"], reverse=True)

        logger.info(f"Retrieved {len(issues)} issues with filters: status={status}, emailid={emailid}")
        return issues

    def set_status(self, issue_id: str, status: IssueStatus) -> Dict:
        """
        Overwrite the status of an issue and return the updated record.

        Raises:
            NotFoundError: no issue with this id
        """
        doc_ref = self.issues_ref.document(issue_id)
        if not doc_ref.get().exists:
            raise NotFoundError("Issue not found")

        try:
            doc_ref.update({"status": status.value, "updated_at": firestore.SERVER_TIMESTAMP})
        except NotFound:
            raise NotFoundError("Issue not found")

        logger.info(f"Issue {issue_id} status set to {status.value}")
        return snapshot_to_dict(doc_ref.get())

    def delete_issues_by_email(self, emailid: str) -> int:
        """Delete every issue submitted with this email. Returns how many were removed."""
        deleted = 0
        for doc in where_filter(self.issues_ref, "emailid", "==", emailid).stream():
            doc.reference.delete()
            deleted += 1
        logger.info(f"Deleted {deleted} issue(s) for {emailid}")
        return deleted


# Global service instance (singleton pattern)
_issue_service = None


def get_issue_service() -> IssueService:
    """Get or create IssueService singleton."""
    global _issue_service
    if _issue_service is None:
        _issue_service = IssueService()
    return _issue_service
