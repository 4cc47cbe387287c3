"""
Authentication schemas: sign-up, sign-in and token responses.
"""

from typing import Any, Optional

from pydantic import BaseModel

from worklog.schemas.user import UserResponse


class SignupRequest(BaseModel):
    """Schema for self-registration."""

    name: Any = None
    email: Any = None
    password: Any = None


class SigninRequest(BaseModel):
    """Schema for login/password sign-in."""

    email: Any = None
    password: Any = None


class TokenSigninRequest(BaseModel):
    """Schema for signing in again with a previously issued token."""

    token: Optional[str] = None


class PasswordChangeRequest(BaseModel):
    """
    Schema for setting a new password.
    The token travels in the body so password recovery links work without an auth header.
    """

    token: Optional[str] = None
    password: Any = None


class AuthResponse(BaseModel):
    """Schema for a successful authentication."""

    token: str
    user: UserResponse
