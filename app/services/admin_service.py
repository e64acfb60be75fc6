"""
Admin Service - credential checks for provisioned administrators.

Admins live in the "admins" collection keyed by adminId and are written only
by scripts/seed_db.py. The API never creates or edits them.
"""

from app.config.firebase import get_db
from app.core.errors import AuthenticationError
from app.services.token_service import issue_token, ADMIN_ROLE
from app.utils.security import hash_password, verify_password
from typing import Dict
import logging

logger = logging.getLogger(__name__)

ADMINS_COLLECTION = "admins"


class AdminService:
    """Service for admin authentication."""

    def __init__(self):
        self.db = get_db()

    def verify_credentials(self, admin_id: str, password: str) -> bool:
        stored_hash = None
        if admin_id and "/" not in admin_id:
            doc = self.db.collection(ADMINS_COLLECTION).document(admin_id).get()
            if doc.exists:
                stored_hash = doc.to_dict().get("password_hash")
        return verify_password(password, stored_hash)

    def login(self, admin_id: str, password: str) -> str:
        """
        Check admin credentials and mint a session token.

        Raises:
            AuthenticationError: unknown admin or wrong password
        """
        if not self.verify_credentials(admin_id, password):
            logger.warning(f"Failed admin login for {admin_id!r}")
            raise AuthenticationError("Invalid admin credentials")

        logger.info(f"Admin logged in: {admin_id}")
        return issue_token(subject=admin_id, role=ADMIN_ROLE)

    def provision_admin(self, admin_id: str, password: str) -> Dict:
        """Create or replace an admin account. Used by the seed script."""
        data = {"adminId": admin_id, "password_hash": hash_password(password)}
        self.db.collection(ADMINS_COLLECTION).document(admin_id).set(data)
        logger.info(f"Admin provisioned: {admin_id}")
        return {"adminId": admin_id}


# Global service instance
_admin_service = None


def get_admin_service() -> AdminService:
    """Get or create AdminService singleton."""
    global _admin_service
    if _admin_service is None:
        _admin_service = AdminService()
    return _admin_service
