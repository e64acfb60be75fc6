"""
Pydantic models for civic issues.
Issues are created from multipart form submissions, so there is no create
model here: the form fields are declared on the route itself.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from enum import Enum


ANONYMOUS_USERNAME = "Anonymous User"


class IssueStatus(str, Enum):
    """Moderation status of an issue. Every issue starts as PENDING."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class IssueFields(BaseModel):
    """Submitter-provided fields of an issue."""
    location: Optional[str] = None
    emailid: Optional[str] = Field(None, description="Submitter email (not checked against users)")
    category: Optional[str] = None
    issue: Optional[str] = Field(None, description="Short label")
    description: Optional[str] = None


class IssueResponse(IssueFields):
    """
    Model for issue responses (what API returns).
    `username` is only present on aggregated reads.
    """
    id: str = Field(..., description="Store-assigned id, increasing with insertion order")
    photo: str = Field(..., description="Public URL of the evidence photo")
    date: Optional[str] = Field(None, description="Creation date, e.g. 10/17/2026")
    status: IssueStatus = IssueStatus.PENDING
    created_at: Optional[datetime] = None
    username: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "id": "186f2c1a9b3e4d00a1b2c3d4",
                "photo": "/uploads/pothole-1760700000000-1a2b3c4d.jpg",
                "location": "Main St",
                "emailid": "a@x.com",
                "category": "Pothole",
                "issue": "road damage",
                "description": "Deep pothole near the bus stop",
                "date": "10/17/2026",
                "status": "pending",
                "username": "Asha",
            }
        }


class StatusUpdateRequest(BaseModel):
    """
    Request to change an issue's status.
    Kept as a plain string so unknown values are reported by the workflow
    with a 400 instead of a schema error.
    """
    status: str = Field(..., description="Target status: pending, accepted or rejected")


class StatusUpdateResponse(BaseModel):
    message: str
    Issue: IssueResponse


class IssueSubmitResponse(BaseModel):
    message: str
    issue: IssueResponse
