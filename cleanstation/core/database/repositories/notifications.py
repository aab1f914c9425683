"""
Notification repository.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from cleanstation.core.models.domain.enums import NotificationType

from ..entities.notifications import Notification
from .base import SqlRepository


class NotificationRepository(SqlRepository[Notification]):
    """Repository for per-user notifications."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Notification)

    async def notify(
        self,
        recipient_id: str,
        title: str,
        message: str,
        *,
        type: NotificationType = NotificationType.ORDER_STATUS_CHANGE,
        link_to_order_id: Optional[str] = None,
    ) -> Notification:
        """Stage a notification in the current transaction."""
        notification = Notification(
            recipient_id=recipient_id,
            type=type,
            title=title,
            message=message,
            link_to_order_id=link_to_order_id,
        )
        return await self.add(notification)

    async def list_for_user(
        self, recipient_id: str, *, unread_only: bool = False, page: int = 1, limit: int = 10
    ) -> Tuple[List[Notification], int]:
        stmt = select(Notification).where(Notification.recipient_id == recipient_id)
        if unread_only:
            stmt = stmt.where(Notification.is_read == False)  # noqa: E712
        stmt = stmt.order_by(Notification.created_at.desc())  # type: ignore[attr-defined]
        return await self._paginate(stmt, page, limit)

    async def unread_count(self, recipient_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(Notification)
            .where(Notification.recipient_id == recipient_id)
            .where(Notification.is_read == False)  # noqa: E712
        )
        return (await self.session.execute(stmt)).scalar_one()
