"""Unit tests for the notification repository."""

from __future__ import annotations

from datetime import datetime, timedelta

from cleanstation.core.database.entities.notifications import Notification
from cleanstation.core.models.domain.enums import NotificationType


async def _seed(repos, recipient_id: str, count: int, read: int = 0) -> None:
    start = datetime(2026, 3, 1, 8, 0)
    for index in range(count):
        await repos.notifications.add(
            Notification(
                recipient_id=recipient_id,
                title=f"Note {index}",
                message="Order moved",
                is_read=index < read,
                created_at=start + timedelta(minutes=index),
            )
        )
    await repos.commit()


class TestNotificationRepository:
    """Tests for per-user notification listing."""

    async def test_notify_stages_notification(self, repos):
        notification = await repos.notifications.notify(
            "user-1", "New task: Mount basins", "Assigned by pat", type=NotificationType.TASK_ASSIGNMENT
        )
        await repos.commit()

        stored = await repos.notifications.get_by_id(notification.id)
        assert stored.type == NotificationType.TASK_ASSIGNMENT
        assert stored.is_read is False
        assert stored.link_to_order_id is None

    async def test_list_for_user_newest_first(self, repos):
        await _seed(repos, "user-1", 3)
        await _seed(repos, "user-2", 2)

        items, total = await repos.notifications.list_for_user("user-1")
        assert total == 3
        assert [n.title for n in items] == ["Note 2", "Note 1", "Note 0"]

    async def test_list_for_user_unread_only(self, repos):
        await _seed(repos, "user-1", 4, read=3)

        items, total = await repos.notifications.list_for_user("user-1", unread_only=True)
        assert total == 1
        assert items[0].title == "Note 3"

    async def test_list_for_user_pagination(self, repos):
        await _seed(repos, "user-1", 5)

        items, total = await repos.notifications.list_for_user("user-1", page=3, limit=2)
        assert total == 5
        assert [n.title for n in items] == ["Note 0"]

    async def test_unread_count(self, repos):
        await _seed(repos, "user-1", 4, read=1)
        await _seed(repos, "user-2", 2)

        assert await repos.notifications.unread_count("user-1") == 3
        assert await repos.notifications.unread_count("nobody") == 0
