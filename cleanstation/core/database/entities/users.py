"""
User and login session entity models.

Users carry a single role which gates every API route. Login sessions are
opaque tokens stored server-side with a fixed expiry.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from cleanstation.core.models.domain.enums import UserRole

from ..base import Base, new_id, utc_now


class UserBase(Base):
    """Base fields for user entity."""

    username: str = Field(max_length=64, unique=True, index=True, description="Login name")
    email: str = Field(max_length=255, unique=True, description="Contact e-mail address")
    full_name: str = Field(max_length=255, description="Display name")
    initials: str = Field(max_length=8, description="Initials shown on history entries")
    role: UserRole = Field(description="Role that gates API access")
    is_active: bool = Field(default=True, description="Inactive users cannot log in")


class User(UserBase, table=True):
    """Application user.

    Table: cs_users
    """

    __tablename__ = "cs_users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    password_hash: str = Field(max_length=255, description="werkzeug password hash")

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"User(id={self.id}, username={self.username}, role={self.role})"


class UserSession(Base, table=True):
    """Server-side login session referenced by an opaque token.

    Table: cs_user_sessions
    """

    __tablename__ = "cs_user_sessions"

    token: str = Field(primary_key=True, max_length=128)
    user_id: str = Field(foreign_key="cs_users.id", index=True, max_length=64)
    created_at: datetime = Field(default_factory=utc_now)
    expires_at: datetime = Field(index=True)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or utc_now()) >= self.expires_at
