"""
Notification entity model.

Notifications are written when an order enters a status that needs attention
from a role (e.g. QC when an order becomes ready for Pre-QC).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from cleanstation.core.models.domain.enums import NotificationType

from ..base import Base, new_id, utc_now


class Notification(Base, table=True):
    """In-app notification for a single user.

    Table: cs_notifications
    """

    __tablename__ = "cs_notifications"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    recipient_id: str = Field(foreign_key="cs_users.id", index=True, max_length=64)
    type: NotificationType = Field(default=NotificationType.ORDER_STATUS_CHANGE)
    title: str = Field(max_length=255)
    message: str
    link_to_order_id: Optional[str] = Field(default=None, foreign_key="cs_orders.id", max_length=64)
    is_read: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)
