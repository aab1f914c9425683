"""
Order Endpoints.

Order intake, listing, status transitions, assignment, history and the
persisted BOM with its CSV export.
"""

import csv
import io
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from cleanstation.core.database.entities.orders import BomItem, Order
from cleanstation.core.database.entities.users import User
from cleanstation.core.errors import ConflictError, NotFoundError, ValidationError
from cleanstation.core.logging_config import get_logger
from cleanstation.core.models.domain.configuration import AccessoryItem, CustomerInfo, OrderData, SinkConfiguration
from cleanstation.core.models.domain.enums import NotificationType, OrderStatus, UserRole
from cleanstation.core.models.io.auth import UserRead
from cleanstation.core.models.io.orders import (
    BomItemRead,
    OrderAssign,
    OrderAssignment,
    OrderCreate,
    OrderHistoryRead,
    OrderRead,
    OrderStatusChanged,
    OrderStatusUpdate,
)
from cleanstation.core.rules import BomGenerator
from cleanstation.core.rules.transitions import assignable_roles, validate_order_transition
from cleanstation.server.core.database import ReposDep
from cleanstation.server.core.security import CurrentUser, require_roles
from cleanstation.server.responses import ApiResponse, ok, paginate
from cleanstation.server.services.workflow import change_order_status, get_order_or_404, notify_role

logger = get_logger(__name__)

router = APIRouter()

_order_managers = require_roles(UserRole.ADMIN, UserRole.PRODUCTION_COORDINATOR)

BOM_EXPORT_COLUMNS = [
    "Position",
    "Build Number",
    "Part Number",
    "Name",
    "Quantity",
    "Category",
    "Type",
    "Indent Level",
    "Custom",
]


def order_data_for(order: Order) -> OrderData:
    """Rebuild BOM generation input from a stored order."""
    return OrderData(
        customer=CustomerInfo(language=order.language),
        build_numbers=order.build_numbers,
        configurations={
            build: SinkConfiguration.model_validate(config) for build, config in order.sink_configurations.items()
        },
        accessories={
            build: [AccessoryItem.model_validate(item) for item in items] for build, items in order.accessories.items()
        },
    )


@router.post(
    "",
    response_model=ApiResponse[OrderRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Order",
    description="Create a production order with its build numbers, sink configurations and accessories.",
    responses={
        409: {"description": "PO number already exists"},
        422: {"description": "Invalid order data"},
    },
)
async def create_order(body: OrderCreate, request: Request, repos: ReposDep, user: User = Depends(_order_managers)):
    """
    Create an order.

    - **poNumber**: Unique customer purchase order number.
    - **buildNumbers**: One or more unique build numbers (one per sink).
    - **wantDate**: Requested delivery date, must be in the future.
    - **language**: Manual language, EN by default.
    - **sinkConfigurations** / **accessories**: Keyed by build number.
    """
    if await repos.orders.get_by_po_number(body.po_number):
        raise ConflictError(f"Order with PO number {body.po_number} already exists")

    order = Order(
        po_number=body.po_number,
        build_numbers=body.build_numbers,
        customer_name=body.customer_name,
        project_name=body.project_name,
        sales_person=body.sales_person,
        want_date=body.want_date,
        language=body.language,
        notes=body.notes,
        sink_configurations={build: config.model_dump() for build, config in body.sink_configurations.items()},
        accessories={build: [item.model_dump() for item in items] for build, items in body.accessories.items()},
        created_by_id=user.id,
    )
    await repos.orders.add(order)
    await repos.history.log(
        order.id,
        "ORDER_CREATED",
        user_id=user.id,
        new_status=OrderStatus.ORDER_CREATED.value,
        notes=f"Order created by {user.full_name}",
    )
    await repos.commit()
    await repos.orders.refresh(order)
    logger.info(f"Created order {order.po_number} with {len(order.build_numbers)} builds")
    return ok(request, OrderRead.model_validate(order))


@router.get(
    "",
    response_model=ApiResponse[List[OrderRead]],
    summary="List Orders",
    description="List orders, newest first, filtered by status and a PO/customer search.",
)
async def list_orders(
    request: Request,
    user: CurrentUser,
    repos: ReposDep,
    order_status: Optional[OrderStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    orders, total = await repos.orders.search(status=order_status, search=search, page=page, limit=limit)
    return ok(request, [OrderRead.model_validate(o) for o in orders], paginate(page, limit, total))


@router.get(
    "/{order_id}",
    response_model=ApiResponse[OrderRead],
    summary="Get Order",
    responses={404: {"description": "Order not found"}},
)
async def get_order(order_id: str, request: Request, user: CurrentUser, repos: ReposDep):
    order = await get_order_or_404(repos, order_id)
    return ok(request, OrderRead.model_validate(order))


@router.put(
    "/{order_id}/status",
    response_model=ApiResponse[OrderStatusChanged],
    summary="Change Order Status",
    description="Move an order to a new status if the caller's role allows the transition.",
    responses={
        400: {"description": "Order already has the requested status"},
        403: {"description": "Role may not make this transition"},
        404: {"description": "Order not found"},
    },
)
async def update_order_status(
    order_id: str, body: OrderStatusUpdate, request: Request, user: CurrentUser, repos: ReposDep
):
    """
    Change the order status.

    ADMIN and PRODUCTION_COORDINATOR may make any transition; other roles
    follow their own transition table. Users of the role responsible for the
    new status are notified.

    - **newStatus**: Target order status.
    - **notes**: Optional history note.
    """
    order = await get_order_or_404(repos, order_id)
    previous = OrderStatus(order.order_status)
    validate_order_transition(user.role, previous, body.new_status)
    notified = await change_order_status(repos, order, body.new_status, user, notes=body.notes)
    await repos.commit()
    return ok(
        request,
        OrderStatusChanged(
            order_id=order.id, previous_status=previous, new_status=body.new_status, notified_users=notified
        ),
    )


@router.get(
    "/{order_id}/history",
    response_model=ApiResponse[List[OrderHistoryRead]],
    summary="Order History",
    description="Audit trail of the order, newest first.",
)
async def get_order_history(order_id: str, request: Request, user: CurrentUser, repos: ReposDep):
    await get_order_or_404(repos, order_id)
    entries = await repos.history.list_for_order(order_id)
    return ok(request, [OrderHistoryRead.model_validate(e) for e in entries])


@router.post(
    "/{order_id}/generate-bom",
    response_model=ApiResponse[Dict[str, Any]],
    summary="Generate Order BOM",
    description="Generate the order's BOM from its stored configurations and persist the flattened lines.",
    responses={422: {"description": "Configuration cannot be turned into a BOM"}},
)
async def generate_order_bom(
    order_id: str, request: Request, repos: ReposDep, user: User = Depends(_order_managers)
):
    """
    Generate and store the BOM of an order.

    Any previously stored BOM lines are replaced.
    """
    order = await get_order_or_404(repos, order_id)
    result = await BomGenerator(repos.catalog).generate(order_data_for(order))
    items = [
        BomItem(
            order_id=order.id,
            position=position,
            build_number=flat.line.build_number,
            item_id=flat.line.id,
            name=flat.line.name,
            quantity=flat.line.quantity,
            category=flat.line.category,
            item_type=flat.line.type,
            indent_level=flat.indent_level,
            is_custom=flat.line.is_custom,
            is_placeholder=flat.line.is_placeholder,
        )
        for position, flat in enumerate(result.flattened)
    ]
    await repos.bom_items.replace_for_order(order.id, items)
    await repos.history.log(order.id, "BOM_GENERATED", user_id=user.id, notes=f"{len(items)} BOM lines generated")
    await repos.commit()
    logger.info(f"Stored {len(items)} BOM lines for order {order.po_number}")
    return ok(request, result.to_dict())


@router.get(
    "/{order_id}/bom",
    response_model=ApiResponse[List[BomItemRead]],
    summary="Get Order BOM",
    description="Read the stored flattened BOM of an order.",
)
async def get_order_bom(order_id: str, request: Request, user: CurrentUser, repos: ReposDep):
    await get_order_or_404(repos, order_id)
    items = await repos.bom_items.list_for_order(order_id)
    return ok(request, [BomItemRead.model_validate(i) for i in items])


@router.get(
    "/{order_id}/bom/export",
    response_class=Response,
    summary="Export Order BOM",
    description="Download the stored flattened BOM of an order as CSV.",
    responses={
        200: {"content": {"text/csv": {}}, "description": "BOM lines followed by item and quantity totals"},
        404: {"description": "Order not found"},
    },
)
async def export_order_bom(order_id: str, user: CurrentUser, repos: ReposDep):
    order = await get_order_or_404(repos, order_id)
    items = await repos.bom_items.list_for_order(order_id)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(BOM_EXPORT_COLUMNS)
    for item in items:
        writer.writerow(
            [
                item.position,
                item.build_number or "",
                item.item_id,
                item.name,
                item.quantity,
                item.category,
                item.item_type,
                item.indent_level,
                "yes" if item.is_custom else "no",
            ]
        )
    writer.writerow([])
    writer.writerow(["Total Items", len(items)])
    writer.writerow(["Total Quantity", sum(item.quantity for item in items)])

    logger.info(f"Exported {len(items)} BOM lines for order {order.po_number}")
    return Response(
        content=buffer.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="order-{order.id}-bom.csv"'},
    )


@router.patch(
    "/{order_id}/assign",
    response_model=ApiResponse[OrderAssignment],
    summary="Assign Order",
    description="Assign an order to a user whose role fits the order status, or clear the assignment.",
    responses={
        400: {"description": "Assignee is inactive or has the wrong role for the order status"},
        404: {"description": "Order or assignee not found"},
    },
)
async def assign_order(
    order_id: str, body: OrderAssign, request: Request, repos: ReposDep, user: User = Depends(_order_managers)
):
    """
    Assign or unassign an order.

    - **assigneeId**: User to assign, or ``null`` to remove the assignment.

    The assignee and the production coordinators are notified.
    """
    order = await get_order_or_404(repos, order_id)
    current = OrderStatus(order.order_status)
    assignee = None
    if body.assignee_id is not None:
        assignee = await repos.users.get_by_id(body.assignee_id)
        if assignee is None:
            raise NotFoundError("User", body.assignee_id)
        if not assignee.is_active:
            raise ValidationError("Assignee is not active")
        allowed = assignable_roles(current)
        if assignee.role not in allowed:
            raise ValidationError(
                f"Cannot assign {UserRole(assignee.role).value} to order with status {current.value}",
                details={"allowed": sorted(role.value for role in allowed)},
            )

    order.current_assignee = body.assignee_id
    await repos.orders.add(order)
    await repos.history.log(
        order.id,
        "ORDER_ASSIGNED" if assignee else "ORDER_UNASSIGNED",
        user_id=user.id,
        new_status=current.value,
        notes=f"Order assigned to {assignee.full_name}" if assignee else "Order assignment removed",
    )
    if assignee is not None:
        title = f"Order {order.po_number} assigned"
        message = f"Order {order.po_number} for {order.customer_name} was assigned to {assignee.full_name}."
        await repos.notifications.notify(
            assignee.id, title, message, type=NotificationType.TASK_ASSIGNMENT, link_to_order_id=order.id
        )
        await notify_role(
            repos,
            UserRole.PRODUCTION_COORDINATOR,
            title,
            message,
            order_id=order.id,
            type=NotificationType.TASK_ASSIGNMENT,
        )
    await repos.commit()
    await repos.orders.refresh(order)
    logger.info(f"Order {order.po_number} assignee set to {body.assignee_id}")
    return ok(
        request,
        OrderAssignment(
            order_id=order.id,
            assignee_id=order.current_assignee,
            assignee=UserRead.model_validate(assignee) if assignee else None,
            updated_at=order.updated_at,
        ),
    )
