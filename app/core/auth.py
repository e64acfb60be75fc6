"""
Bearer-token gate for admin-only routes.

Usage:
    @router.get("/api/issues")
    async def list_issues(admin: dict = Depends(require_admin)): ...
"""

from typing import Dict, Optional

from fastapi import Header

from app.core.errors import InvalidTokenError, MissingCredentialsError
from app.services.token_service import verify_admin_token


def extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization or not authorization.strip():
        raise MissingCredentialsError()

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise InvalidTokenError("Malformed Authorization header")
    return parts[1]


async def require_admin(authorization: Optional[str] = Header(None)) -> Dict:
    """FastAPI dependency: returns the verified admin claims."""
    token = extract_bearer_token(authorization)
    return verify_admin_token(token)
