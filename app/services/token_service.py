"""
Admin token issuance and verification.

Tokens are HS256 JWTs carrying {sub: adminId, role: "admin", iat, exp}.
Nothing is stored server side; a token stays valid until it expires.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from jose import jwt, JWTError

from app.core.errors import InvalidTokenError
from app.core.settings import settings
import logging

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"

_DURATION = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)
_UNIT_SECONDS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_expiry(value: str) -> timedelta:
    """
    Parse a token lifetime such as "1h", "30m", "7d", "45s" or "3600".
    """
    match = _DURATION.match(str(value))
    if not match:
        raise ValueError(f"Invalid token expiry: {value!r}")
    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _UNIT_SECONDS[unit.lower()])


def issue_token(
    subject: str,
    role: str = ADMIN_ROLE,
    expires_in: Optional[timedelta] = None,
    secret: Optional[str] = None,
) -> str:
    now = datetime.now(timezone.utc)
    lifetime = expires_in if expires_in is not None else parse_expiry(settings.JWT_EXPIRE)
    claims = {
        "sub": subject,
        "role": role,
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(claims, secret or settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str, secret: Optional[str] = None) -> Dict:
    """
    Decode and check a token.

    Raises:
        InvalidTokenError: bad signature, expired, malformed or missing subject
    """
    try:
        claims = jwt.decode(token, secret or settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.info(f"Token rejected: {e}")
        raise InvalidTokenError()

    if not claims.get("sub"):
        raise InvalidTokenError()
    return claims


def verify_admin_token(token: str) -> Dict:
    claims = verify_token(token)
    if claims.get("role") != ADMIN_ROLE:
        raise InvalidTokenError("Admin role required")
    return claims
