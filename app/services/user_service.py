"""
User Service - Manage user accounts in Firestore.

Users are stored in the "users" collection keyed by email. Password hashes
never leave this module: callers get verify_credentials() and public
profiles only.
"""

from firebase_admin import firestore
from app.config.firebase import get_db
from app.core.errors import ConflictError, ValidationError
from app.models.user import UserCreate
from app.utils.firestore_helpers import chunked, snapshot_to_dict, where_filter
from app.utils.security import hash_password, verify_password
from typing import Dict, Iterable, List, Optional
import re
import logging

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
_PRIVATE_FIELDS = ("password", "password_hash", "id")


def to_public_profile(user_data: Dict) -> Dict:
    """Drop credential fields from a stored user document."""
    return {key: value for key, value in user_data.items() if key not in _PRIVATE_FIELDS}


class UserService:
    """
    Service for user management in Firestore.
    """

    def __init__(self):
        self.db = get_db()

    @property
    def users_ref(self):
        return self.db.collection(USERS_COLLECTION)

    def create_user(self, user: UserCreate) -> Dict:
        """
        Create a new user with a hashed password.

        Raises:
            ValidationError: email contains "/" (not usable as a document id)
            ConflictError: an account with this email already exists
        """
        email = user.email.strip()
        if "/" in email:
            raise ValidationError("Invalid email")

        user_ref = self.users_ref.document(email)
        if user_ref.get().exists:
            raise ConflictError("User with this email already exists")

        user_data = user.model_dump(exclude={"password"})
        user_data.update({
            "email": email,
            "password_hash": hash_password(user.password),
            "created_at": firestore.SERVER_TIMESTAMP,
        })
        user_ref.set(user_data)

        created = user_ref.get().to_dict()
        logger.info(f"User created: {email}")
        return to_public_profile(created)

    def get_user(self, email: str) -> Optional[Dict]:
        doc = self.users_ref.document(email).get()
        if not doc.exists:
            return None
        return to_public_profile(doc.to_dict())

    def verify_credentials(self, email: str, password: str) -> bool:
        stored_hash = None
        if email and "/" not in email:
            doc = self.users_ref.document(email).get()
            if doc.exists:
                stored_hash = doc.to_dict().get("password_hash")
        return verify_password(password, stored_hash)

    def get_names_by_email(self, emails: Iterable[str]) -> Dict[str, str]:
        """
        Batch lookup of display names.

        Emails without an account are simply absent from the result.
        """
        distinct = sorted({email for email in emails if email})
        names: Dict[str, str] = {}
        for chunk in chunked(distinct):
            for doc in where_filter(self.users_ref, "email", "in", chunk).stream():
                data = doc.to_dict() or {}
                if data.get("name"):
                    names[data["email"]] = data["name"]
        return names

    def count_users(self) -> int:
        return sum(1 for _ in self.users_ref.stream())

    def search_users(self, name: str) -> List[Dict]:
        """
        Case-insensitive substring search on the display name.

        Firestore has no pattern queries, so matching happens in Python.
        The search text is escaped, never compiled as a user-supplied regex.
        """
        if not name or not name.strip():
            raise ValidationError("Name required")

        pattern = re.compile(re.escape(name.strip()), re.IGNORECASE)
        matches = []
        for doc in self.users_ref.stream():
            data = snapshot_to_dict(doc)
            if pattern.search(data.get("name") or ""):
                matches.append(to_public_profile(data))

        matches.sort(key=lambda u: (u.get("name") or "").lower())
        logger.info(f"User search '{name}' matched {len(matches)} user(s)")
        return matches

    def delete_user(self, email: str) -> bool:
        """Delete a user by email. Returns False when no such user exists."""
        user_ref = self.users_ref.document(email)
        if not user_ref.get().exists:
            return False
        user_ref.delete()
        logger.info(f"User deleted: {email}")
        return True


# Global service instance (singleton pattern)
_user_service = None


def get_user_service() -> UserService:
    """
    Get or create UserService singleton instance.

    Returns:
        UserService: The global user service instance
    """
    global _user_service
    if _user_service is None:
        _user_service = UserService()
    return _user_service
