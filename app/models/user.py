"""
User and admin models for authentication and user management.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class UserCreate(BaseModel):
    """Signup payload. Extra profile fields are kept as submitted."""

    email: str = Field(..., min_length=3, max_length=254, description="Unique account email")
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    password: str = Field(..., min_length=1, max_length=72, description="Plain password, hashed before storage")

    class Config:
        extra = "allow"


class UserLogin(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    """User as returned to clients. Never carries the password hash."""

    email: str
    name: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        extra = "allow"


class UserLoginResponse(BaseModel):
    message: str
    user: UserResponse


class UserCountResponse(BaseModel):
    count: int


class AdminLogin(BaseModel):
    adminId: str
    password: str


class AdminLoginResponse(BaseModel):
    message: str
    token: str


class MessageResponse(BaseModel):
    message: str
