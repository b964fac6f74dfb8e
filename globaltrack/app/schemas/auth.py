"""
Authentication Pydantic schemas.
"""

from pydantic import Field
from typing import Optional
from globaltrack.app.schemas.common import CamelModel


class LoginRequest(CamelModel):
    """
    Schema for admin login.

    Both fields are optional here so a missing one produces the login
    endpoint's own 400 message.
    """
    username: Optional[str] = Field(None, description="Admin username (case-insensitive)")
    password: Optional[str] = Field(None, description="Admin password (case-sensitive)")


class AdminUser(CamelModel):
    id: str
    username: str


class LoginResponse(CamelModel):
    """Returned by a successful login."""
    token: str
    token_type: str = "bearer"
    user: AdminUser


class LogoutResponse(CamelModel):
    revoked: bool
