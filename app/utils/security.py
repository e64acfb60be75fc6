"""
Password hashing helpers.

Passwords are stored only as salted bcrypt hashes. Verification goes through
passlib, which compares digests in constant time.
"""

import logging
from typing import Optional

from passlib.context import CryptContext

from app.core.settings import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.PASSWORD_HASH_ROUNDS,
)

# Compared against when an account does not exist, so unknown ids cost
# the same as a wrong password.
_DUMMY_HASH: Optional[str] = None


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """
    Check a plain password against a stored hash.

    Returns False for a missing or unreadable hash instead of raising.
    """
    global _DUMMY_HASH
    if not password_hash:
        if _DUMMY_HASH is None:
            _DUMMY_HASH = pwd_context.hash("civictrack-dummy-password")
        pwd_context.verify(password, _DUMMY_HASH)
        return False

    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError) as e:
        logger.warning(f"Stored password hash could not be verified: {e}")
        return False
