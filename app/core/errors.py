"""
Error taxonomy for CivicTrack.

Every error carries the HTTP status it is rendered with. Route handlers
re-raise these unchanged; anything else is logged and translated to the
nearest entry before it leaves the handler.
"""

from typing import Optional

from fastapi import status


class CivicTrackError(Exception):
    """Base class for all domain errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CivicTrackError):
    """Missing or unacceptable input (no file, no search name, bad status)."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(CivicTrackError):
    """Credentials were supplied but did not match."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class MissingCredentialsError(CivicTrackError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "No token provided"


class InvalidTokenError(CivicTrackError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid or expired token"


class NotFoundError(CivicTrackError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(CivicTrackError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class UploadError(CivicTrackError):
    """The evidence backend did not accept the file."""
    default_message = "File upload failed"


class PersistenceError(CivicTrackError):
    """A read or write against the document store failed."""
    default_message = "Internal Server Error"


class PartialDeletionError(PersistenceError):
    """
    Cascading delete stopped half way: the user is gone but some of
    their issues are still stored.
    """
    default_message = "User deleted but related issues could not be removed"
