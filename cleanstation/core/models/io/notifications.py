"""
Notification I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from cleanstation.core.models.domain.enums import NotificationType

from .common import ReadModel


class NotificationRead(ReadModel):
    id: str
    type: NotificationType
    title: str
    message: str
    link_to_order_id: Optional[str] = None
    is_read: bool
    created_at: datetime
