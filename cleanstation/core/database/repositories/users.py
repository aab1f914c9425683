"""
User and session repositories.

Provides data access for users and their login sessions.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete as sa_delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from cleanstation.core.models.domain.enums import UserRole

from ..base import utc_now
from ..entities.users import User, UserSession
from .base import SqlRepository


class UserRepository(SqlRepository[User]):
    """Repository for user data access operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, User)

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get a user by login name.

        Args:
            username: Login name (case-sensitive)

        Returns:
            User or None if not found
        """
        stmt = select(User).where(User.username == username)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_active_by_roles(self, roles: List[UserRole]) -> List[User]:
        """Get active users holding any of ``roles``.

        Args:
            roles: Roles to match

        Returns:
            List of matching users ordered by username
        """
        stmt = (
            select(User)
            .where(User.role.in_(roles))  # type: ignore[attr-defined]
            .where(User.is_active == True)  # noqa: E712
            .order_by(User.username)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class SessionRepository(SqlRepository[UserSession]):
    """Repository for login sessions."""

    pk_field = "token"

    def __init__(self, session: AsyncSession):
        super().__init__(session, UserSession)

    async def get_valid(self, token: str, now: Optional[datetime] = None) -> Optional[UserSession]:
        """Get a session by token if it has not expired.

        Args:
            token: Opaque session token
            now: Reference time (defaults to the current UTC time)

        Returns:
            Session or None if missing or expired
        """
        stmt = select(UserSession).where(UserSession.token == token).where(UserSession.expires_at > (now or utc_now()))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def purge_expired(self, now: Optional[datetime] = None) -> int:
        """Delete every expired session.

        Returns:
            Number of deleted sessions
        """
        stmt = sa_delete(UserSession).where(UserSession.expires_at <= (now or utc_now()))
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount or 0
