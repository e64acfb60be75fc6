"""
Admin session endpoints.

Admins log in with their adminId and password and receive a bearer token;
every moderation endpoint checks that token via app.core.auth.require_admin.
"""

from fastapi import APIRouter, Depends

from app.core.auth import require_admin
from app.core.errors import CivicTrackError, PersistenceError
from app.models.user import AdminLogin, AdminLoginResponse
from app.services.admin_service import get_admin_service
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Admin"])


@router.post("/admins/login", response_model=AdminLoginResponse)
def admin_login(credentials: AdminLogin):
    """
    Exchange admin credentials for a signed, time-limited token.

    Raises:
        401: Unknown admin or wrong password
    """
    try:
        token = get_admin_service().login(credentials.adminId, credentials.password)
        return {"message": "Admin login successful!", "token": token}
    except CivicTrackError:
        raise
    except Exception as e:
        logger.error(f"Error logging in admin: {e}", exc_info=True)
        raise PersistenceError() from e


@router.get("/admin/verify")
async def verify_admin_session(admin: dict = Depends(require_admin)):
    """Lets the dashboard check that its stored token is still valid."""
    return {"valid": True}
