"""
Issue endpoints - submission, moderation and public listings.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from app.core.auth import require_admin
from app.core.errors import CivicTrackError, PersistenceError
from app.models.issue import (
    IssueFields, IssueResponse, IssueSubmitResponse,
    StatusUpdateRequest, StatusUpdateResponse,
)
from app.services.issue_aggregation_service import get_issue_aggregation_service
from app.services.moderation_service import get_moderation_service
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/issues", tags=["Issues"])


@router.post("", response_model=IssueSubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_issue(
    photo: Optional[UploadFile] = File(None, description="Evidence photo"),
    location: Optional[str] = Form(None),
    emailid: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    issue: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
):
    """
    Submit a new civic issue with a photo.

    This endpoint:
    1. Rejects the request if no photo is attached (400)
    2. Stores the photo with the configured evidence backend
    3. Creates the issue in the pending state

    Any `status` sent by the client is ignored.
    """
    logger.info(f"📝 POST /api/issues - category={category}, emailid={emailid}")
    fields = IssueFields(
        location=location,
        emailid=emailid,
        category=category,
        issue=issue,
        description=description,
    )

    try:
        data = await photo.read() if photo is not None else None
        filename = photo.filename if photo is not None else None

        created = get_moderation_service().submit_issue(fields, data, filename)
        logger.info(f"✅ Issue created successfully: {created['id']}")
        return {"message": "Issue submitted successfully!", "issue": created}

    except CivicTrackError as e:
        logger.warning(f"❌ POST /api/issues rejected: {e.message}")
        raise
    except Exception as e:
        logger.error(f"❌ POST /api/issues - Issue submission failed: {e}", exc_info=True)
        raise PersistenceError("Failed to submit issue") from e


@router.get("", response_model=List[IssueResponse])
async def get_all_issues(admin: dict = Depends(require_admin)):
    """All issues, most recent first (admin only)."""
    try:
        return get_issue_aggregation_service().get_all_issues()
    except CivicTrackError:
        raise
    except Exception as e:
        logger.error(f"Error fetching issues: {e}", exc_info=True)
        raise PersistenceError("Failed to fetch issues") from e


@router.get("/status/{issue_status}", response_model=List[IssueResponse])
async def get_issues_by_status(issue_status: str):
    """Issues with the given status (pending, accepted, rejected)."""
    try:
        return get_issue_aggregation_service().get_issues_by_status(issue_status)
    except CivicTrackError:
        raise
    except Exception as e:
        logger.error(f"Error fetching filtered issues: {e}", exc_info=True)
        raise PersistenceError("Failed to fetch filtered issues") from e


@router.get("/user/{emailid}", response_model=List[IssueResponse])
async def get_issues_by_user(
    emailid: str,
    issue_status: Optional[str] = Query(None, alias="status", description="Optional status filter"),
):
    """Issues submitted with the given email, optionally filtered by status."""
    try:
        return get_issue_aggregation_service().get_issues_by_user(emailid, status=issue_status)
    except CivicTrackError:
        raise
    except Exception as e:
        logger.error(f"Error fetching user issues: {e}", exc_info=True)
        raise PersistenceError("Failed to fetch user issues") from e


@router.get("/accepted", response_model=List[IssueResponse])
async def get_accepted_issues():
    """Accepted issues for the public board."""
    try:
        return get_issue_aggregation_service().get_issues_by_status("accepted")
    except CivicTrackError:
        raise
    except Exception as e:
        logger.error(f"Error fetching accepted issues: {e}", exc_info=True)
        raise PersistenceError("Failed to fetch accepted issues") from e


@router.patch("/{issue_id}/status", response_model=StatusUpdateResponse)
async def change_issue_status(
    issue_id: str,
    request: StatusUpdateRequest,
    admin: dict = Depends(require_admin),
):
    """
    Change the moderation status of an issue (admin only).

    Raises:
        400: Unknown status, or a transition the workflow does not allow
        404: Issue not found
    """
    try:
        updated = get_moderation_service().change_status(issue_id, request.status)
        logger.info(f"Admin {admin.get('sub')} set issue {issue_id} to {updated['status']}")
        return {"message": f"Issue {updated['status']}", "Issue": updated}
    except CivicTrackError:
        raise
    except Exception as e:
        logger.error(f"Failed to update issue status: {e}", exc_info=True)
        raise PersistenceError("Failed to update issue status") from e
