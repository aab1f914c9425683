"""
Notification Endpoints.

Each user only reads and acknowledges their own notifications.
"""

from typing import List

from fastapi import APIRouter, Query, Request

from cleanstation.core.errors import NotFoundError
from cleanstation.core.models.io.notifications import NotificationRead
from cleanstation.server.core.database import ReposDep
from cleanstation.server.core.security import CurrentUser
from cleanstation.server.responses import ApiResponse, ok, paginate

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[List[NotificationRead]],
    summary="List Notifications",
    description="The caller's notifications, newest first.",
)
async def list_notifications(
    request: Request,
    user: CurrentUser,
    repos: ReposDep,
    unread_only: bool = Query(False, alias="unreadOnly"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    notifications, total = await repos.notifications.list_for_user(
        user.id, unread_only=unread_only, page=page, limit=limit
    )
    return ok(request, [NotificationRead.model_validate(n) for n in notifications], paginate(page, limit, total))


@router.patch(
    "/{notification_id}/read",
    response_model=ApiResponse[NotificationRead],
    summary="Mark Notification Read",
    responses={404: {"description": "Notification not found or owned by someone else"}},
)
async def mark_read(notification_id: str, request: Request, user: CurrentUser, repos: ReposDep):
    notification = await repos.notifications.get_by_id(notification_id)
    if notification is None or notification.recipient_id != user.id:
        raise NotFoundError("Notification", notification_id)
    notification.is_read = True
    notification = await repos.notifications.update(notification)
    return ok(request, NotificationRead.model_validate(notification))
