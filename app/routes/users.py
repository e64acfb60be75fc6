"""
User endpoints - signup/login for citizens, and admin-only user management.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from app.core.auth import require_admin
from app.core.errors import AuthenticationError, CivicTrackError, PersistenceError
from app.models.user import (
    MessageResponse, UserCountResponse, UserCreate, UserLogin,
    UserLoginResponse, UserResponse,
)
from app.services.moderation_service import get_moderation_service
from app.services.user_service import get_user_service
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post("/signup", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def signup(user: UserCreate):
    try:
        get_user_service().create_user(user)
        return {"message": "User created successfully"}
    except CivicTrackError:
        raise
    except Exception as e:
        logger.error(f"Error creating user: {e}", exc_info=True)
        raise PersistenceError() from e


@router.post("/login", response_model=UserLoginResponse)
def login(credentials: UserLogin):
    try:
        user_service = get_user_service()
        if not user_service.verify_credentials(credentials.email, credentials.password):
            raise AuthenticationError("Invalid credentials")
        return {"message": "Login successful", "user": user_service.get_user(credentials.email)}
    except CivicTrackError:
        raise
    except Exception as e:
        # Credential paths never echo the underlying error
        logger.error(f"Error logging in user: {e}", exc_info=True)
        raise PersistenceError() from e


@router.get("/count", response_model=UserCountResponse)
async def count_users(admin: dict = Depends(require_admin)):
    """Total number of users (admin dashboard)."""
    try:
        return {"count": get_user_service().count_users()}
    except CivicTrackError:
        raise
    except Exception as e:
        logger.error(f"Error fetching user count: {e}", exc_info=True)
        raise PersistenceError("Error fetching user count") from e


@router.get("/search", response_model=List[UserResponse])
async def search_users(
    name: Optional[str] = Query(None, description="Case-insensitive part of the name"),
    admin: dict = Depends(require_admin),
):
    try:
        return get_user_service().search_users(name)
    except CivicTrackError:
        raise
    except Exception as e:
        logger.error(f"Error searching users: {e}", exc_info=True)
        raise PersistenceError("Error searching users") from e


@router.delete("/{email}", response_model=MessageResponse)
async def delete_user(email: str, admin: dict = Depends(require_admin)):
    """
    Delete a user and every issue they submitted (admin only).

    Raises:
        404: No user with this email; issues are left untouched
        500: User deleted but their issues could not all be removed
    """
    try:
        removed = get_moderation_service().delete_user_and_issues(email)
        logger.info(f"Admin {admin.get('sub')} deleted user {email} and {removed} issue(s)")
        return {"message": "User and all related issues deleted successfully"}
    except CivicTrackError:
        raise
    except Exception as e:
        logger.error(f"Error deleting user and issues: {e}", exc_info=True)
        raise PersistenceError("Failed to delete user and issues") from e
