"""
Service Order Endpoints.

The service department requests replacement parts; visibility of the list
depends on the caller's role.
"""

from typing import List, Optional, Sequence

from fastapi import APIRouter, Depends, Query, Request, status

from cleanstation.core.database.entities.service_orders import ServiceOrder, ServiceOrderItem
from cleanstation.core.database.entities.users import User
from cleanstation.core.database.repositories import RepoBundle
from cleanstation.core.errors import BusinessRuleError, NotFoundError, PermissionDeniedError
from cleanstation.core.logging_config import get_logger
from cleanstation.core.models.domain.enums import ServiceOrderStatus, UserRole
from cleanstation.core.models.io.service_orders import ServiceOrderCreate, ServiceOrderItemRead, ServiceOrderRead
from cleanstation.server.core.database import ReposDep
from cleanstation.server.core.security import CurrentUser, require_roles
from cleanstation.server.responses import ApiResponse, ok, paginate

logger = get_logger(__name__)

router = APIRouter()

FULL_VISIBILITY = (UserRole.ADMIN, UserRole.PROCUREMENT_SPECIALIST)
FULFILMENT_ROLES = (UserRole.PRODUCTION_COORDINATOR, UserRole.ASSEMBLER, UserRole.QC_PERSON)
FULFILMENT_STATUSES = (ServiceOrderStatus.APPROVED, ServiceOrderStatus.ORDERED, ServiceOrderStatus.RECEIVED)


def service_order_read(order: ServiceOrder, items: Sequence[ServiceOrderItem]) -> ServiceOrderRead:
    return ServiceOrderRead(
        **order.model_dump(), items=[ServiceOrderItemRead.model_validate(item) for item in items]
    )


def _check_visible(order: ServiceOrder, user: User) -> None:
    if user.role in FULL_VISIBILITY:
        return
    if user.role == UserRole.SERVICE_DEPARTMENT and order.requested_by_id == user.id:
        return
    if user.role in FULFILMENT_ROLES and order.status in FULFILMENT_STATUSES:
        return
    raise PermissionDeniedError("You cannot view this service order")


async def get_service_order_or_404(repos: RepoBundle, service_order_id: str) -> ServiceOrder:
    order = await repos.service_orders.get_by_id(service_order_id)
    if order is None:
        raise NotFoundError("Service order", service_order_id)
    return order


@router.get(
    "",
    response_model=ApiResponse[List[ServiceOrderRead]],
    summary="List Service Orders",
    description="Service department sees its own requests; procurement and admins see all; "
    "production roles only see approved, ordered and received requests.",
    responses={403: {"description": "Role cannot view service orders"}},
)
async def list_service_orders(
    request: Request,
    user: CurrentUser,
    repos: ReposDep,
    order_status: Optional[ServiceOrderStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    requested_by_id = None
    statuses: Optional[List[ServiceOrderStatus]] = [order_status] if order_status else None
    if user.role == UserRole.SERVICE_DEPARTMENT:
        requested_by_id = user.id
    elif user.role in FULFILMENT_ROLES:
        allowed = [s for s in FULFILMENT_STATUSES if statuses is None or s in statuses]
        if not allowed:
            return ok(request, [], paginate(page, limit, 0))
        statuses = allowed
    elif user.role not in FULL_VISIBILITY:
        raise PermissionDeniedError("Role cannot view service orders")

    orders, total = await repos.service_orders.search(
        requested_by_id=requested_by_id, statuses=statuses, page=page, limit=limit
    )
    items = await repos.service_orders.get_items_map([o.id for o in orders])
    return ok(request, [service_order_read(o, items[o.id]) for o in orders], paginate(page, limit, total))


@router.post(
    "",
    response_model=ApiResponse[ServiceOrderRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Service Order",
    responses={422: {"description": "Unknown parts requested"}},
)
async def create_service_order(
    body: ServiceOrderCreate,
    request: Request,
    repos: ReposDep,
    user: User = Depends(require_roles(UserRole.SERVICE_DEPARTMENT, UserRole.ADMIN)),
):
    """
    Request service parts.

    - **items**: Part ids with requested quantities (at least 1 each).
    """
    part_ids = [item.part_id for item in body.items]
    known = {part.part_id for part in await repos.parts.get_many(part_ids)}
    missing = sorted({part_id for part_id in part_ids if part_id not in known})
    if missing:
        raise BusinessRuleError("Unknown parts requested", details={"missing_part_ids": missing})

    order = ServiceOrder(requested_by_id=user.id, notes=body.notes)
    await repos.service_orders.add(order)
    items = [ServiceOrderItem(service_order_id=order.id, **item.model_dump()) for item in body.items]
    for item in items:
        await repos.service_orders.add(item)
    await repos.commit()
    await repos.service_orders.refresh(order)
    logger.info(f"Service order {order.id} requested by {user.username} with {len(items)} items")
    return ok(request, service_order_read(order, items))


@router.get(
    "/{service_order_id}",
    response_model=ApiResponse[ServiceOrderRead],
    summary="Get Service Order",
    responses={403: {"description": "Not visible to the caller"}, 404: {"description": "Not found"}},
)
async def get_service_order(service_order_id: str, request: Request, user: CurrentUser, repos: ReposDep):
    order = await get_service_order_or_404(repos, service_order_id)
    _check_visible(order, user)
    return ok(request, service_order_read(order, await repos.service_orders.get_items(order.id)))
