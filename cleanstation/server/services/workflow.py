"""
Order workflow helpers.

Status changes always write a history entry and notify the role that has to
act next; these helpers keep that sequence in one place for every router
that moves an order.
"""

from typing import Optional

from cleanstation.core.database.entities.orders import Order
from cleanstation.core.database.entities.users import User
from cleanstation.core.database.repositories import RepoBundle
from cleanstation.core.errors import NotFoundError
from cleanstation.core.logging_config import get_logger
from cleanstation.core.models.domain.enums import NotificationType, OrderStatus, UserRole
from cleanstation.core.rules.transitions import notification_role

logger = get_logger(__name__)


async def get_order_or_404(repos: RepoBundle, order_id: str) -> Order:
    order = await repos.orders.get_by_id(order_id)
    if order is None:
        raise NotFoundError("Order", order_id)
    return order


async def notify_role(
    repos: RepoBundle,
    role: UserRole,
    title: str,
    message: str,
    *,
    order_id: Optional[str] = None,
    type: NotificationType = NotificationType.ORDER_STATUS_CHANGE,
) -> int:
    """
    Notify every active user holding ``role``.

    Returns:
        Number of notifications written
    """
    recipients = await repos.users.list_active_by_roles([role])
    for recipient in recipients:
        await repos.notifications.notify(recipient.id, title, message, type=type, link_to_order_id=order_id)
    return len(recipients)


async def change_order_status(
    repos: RepoBundle,
    order: Order,
    new_status: OrderStatus,
    user: User,
    *,
    action: str = "STATUS_UPDATED",
    notes: Optional[str] = None,
) -> int:
    """
    Move an order to ``new_status`` inside the current transaction.

    Writes the history entry and notifies the role responsible for the new
    status. The caller commits.

    Args:
        repos: Repository bundle of the request
        order: Order to update
        new_status: Target status
        user: Acting user
        action: History action name
        notes: Optional history notes

    Returns:
        Number of users notified
    """
    old_status = order.order_status
    order.order_status = new_status
    await repos.orders.add(order)
    await repos.history.log(
        order.id,
        action,
        user_id=user.id,
        old_status=OrderStatus(old_status).value,
        new_status=new_status.value,
        notes=notes,
    )
    logger.info(f"Order {order.po_number}: {OrderStatus(old_status).value} -> {new_status.value} by {user.username}")

    role = notification_role(new_status)
    if role is None:
        return 0
    return await notify_role(
        repos,
        role,
        f"Order {order.po_number} is {new_status.value}",
        f"Order {order.po_number} for {order.customer_name} moved to {new_status.value}.",
        order_id=order.id,
    )
