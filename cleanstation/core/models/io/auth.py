"""
Authentication and user I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from cleanstation.core.models.domain.enums import UserRole

from .common import ReadModel, RequestModel


class LoginRequest(RequestModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserRead(ReadModel):
    """Schema for reading a user; never exposes the password hash."""

    id: str
    username: str
    email: str
    full_name: str
    initials: str
    role: UserRole
    is_active: bool
    created_at: datetime


class LoginResponse(ReadModel):
    token: str = Field(description="Session token; also set as the session cookie")
    expires_at: datetime
    user: UserRead


class UserCreate(RequestModel):
    """Schema for creating a user via the admin API."""

    username: str = Field(min_length=3, max_length=64)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+$", max_length=255)
    full_name: str = Field(min_length=1, max_length=255)
    initials: str = Field(min_length=1, max_length=8)
    role: UserRole
    password: str = Field(min_length=8, description="Plain text; stored as a werkzeug hash")
    is_active: bool = True


class UserUpdate(RequestModel):
    email: Optional[str] = Field(default=None, pattern=r"^[^@\s]+@[^@\s]+$")
    full_name: Optional[str] = None
    initials: Optional[str] = None
    role: Optional[UserRole] = None
    password: Optional[str] = Field(default=None, min_length=8)
    is_active: Optional[bool] = None
