"""
MindEase Backend — Account Schemas
====================================

What:  Request and response models for /auth/register and /auth/login.

Request fields are Optional on purpose: presence is checked by the account
service so a missing field yields 400 with the endpoint's own message
instead of FastAPI's generic 422.
"""

from typing import Optional

from pydantic import BaseModel, Field

# Width of users.email
MAX_EMAIL_LENGTH = 255


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = Field(default=None, max_length=MAX_EMAIL_LENGTH)
    password: Optional[str] = None
    department: Optional[str] = None
    batch: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserSummary(BaseModel):
    """Non-secret user fields returned on login."""
    id: int
    name: Optional[str] = None
    email: str
    batch: Optional[str] = None
    department: Optional[str] = None


class LoginResponse(BaseModel):
    message: str = Field(default="Login successful")
    user: UserSummary
