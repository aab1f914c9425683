"""
Service Department Endpoints.

Parts browsing for service requests and approval of pending service orders.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from cleanstation.core.database.base import utc_now
from cleanstation.core.database.entities.users import User
from cleanstation.core.errors import BusinessRuleError
from cleanstation.core.logging_config import get_logger
from cleanstation.core.models.domain.enums import (
    NotificationType,
    PartStatus,
    PartType,
    ServiceOrderAction,
    ServiceOrderStatus,
    UserRole,
)
from cleanstation.core.models.io.catalog import PartRead
from cleanstation.core.models.io.service_orders import ServiceOrderApproval, ServiceOrderRead
from cleanstation.server.core.database import ReposDep
from cleanstation.server.core.security import require_roles
from cleanstation.server.responses import ApiResponse, ok, paginate

from .service_orders import get_service_order_or_404, service_order_read

logger = get_logger(__name__)

router = APIRouter()

DECISION_TITLES = {
    ServiceOrderAction.APPROVE: "Service order approved",
    ServiceOrderAction.REJECT: "Service order rejected",
    ServiceOrderAction.REQUEST_MODIFICATION: "Service order needs changes",
}


@router.get(
    "/parts/browse",
    response_model=ApiResponse[List[PartRead]],
    summary="Browse Service Parts",
    description="Search the parts catalog with type/status filters, sorting and pagination.",
    dependencies=[
        Depends(
            require_roles(
                UserRole.ADMIN,
                UserRole.PRODUCTION_COORDINATOR,
                UserRole.PROCUREMENT_SPECIALIST,
                UserRole.SERVICE_DEPARTMENT,
            )
        )
    ],
)
async def browse_parts(
    request: Request,
    repos: ReposDep,
    search: Optional[str] = Query(None),
    part_type: Optional[PartType] = Query(None, alias="type"),
    part_status: Optional[PartStatus] = Query(None, alias="status"),
    sort_by: str = Query("name", alias="sortBy", pattern="^(name|partId)$"),
    sort_order: str = Query("asc", alias="sortOrder", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    """
    Browse parts.

    - **search**: Matches name, part number or manufacturer part number.
    - **type** / **status**: Filters.
    - **sortBy**: name or partId; **sortOrder**: asc or desc.
    """
    parts, total = await repos.parts.browse(
        search=search,
        part_type=part_type,
        status=part_status,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return ok(request, [PartRead.model_validate(p) for p in parts], paginate(page, limit, total))


@router.post(
    "/orders/{service_order_id}/approve",
    response_model=ApiResponse[ServiceOrderRead],
    summary="Decide Service Order",
    description="Approve, reject or send back a pending service order.",
    responses={422: {"description": "Order not pending or inactive parts requested"}},
)
async def approve_service_order(
    service_order_id: str,
    body: ServiceOrderApproval,
    request: Request,
    repos: ReposDep,
    user: User = Depends(require_roles(UserRole.ADMIN, UserRole.PROCUREMENT_SPECIALIST)),
):
    """
    Decide on a service order.

    - **action**: APPROVE, REJECT or REQUEST_MODIFICATION. A modification
      request keeps the order pending and records the notes.
    - **itemAdjustments**: Approved quantity per item; unadjusted items are
      approved as requested.
    """
    order = await get_service_order_or_404(repos, service_order_id)
    if order.status != ServiceOrderStatus.PENDING_APPROVAL:
        raise BusinessRuleError(f"Service order is {ServiceOrderStatus(order.status).value}, not PENDING_APPROVAL")

    items = await repos.service_orders.get_items(order.id)
    adjustments = {adj.item_id: adj for adj in body.item_adjustments}
    unknown = sorted(set(adjustments) - {item.id for item in items})
    if unknown:
        raise BusinessRuleError("Adjustments reference unknown items", details={"item_ids": unknown})

    if body.action == ServiceOrderAction.APPROVE:
        parts = await repos.parts.get_many([item.part_id for item in items])
        inactive = sorted(p.part_id for p in parts if p.status != PartStatus.ACTIVE)
        if inactive:
            raise BusinessRuleError("Cannot approve inactive parts", details={"inactive_part_ids": inactive})
        for item in items:
            adjustment = adjustments.get(item.id)
            item.quantity_approved = adjustment.quantity_approved if adjustment else item.quantity_requested
            if adjustment and adjustment.notes:
                item.notes = adjustment.notes
            await repos.service_orders.add(item)
        order.status = ServiceOrderStatus.APPROVED
        order.approved_by_id = user.id
        order.approved_at = utc_now()
    elif body.action == ServiceOrderAction.REJECT:
        order.status = ServiceOrderStatus.REJECTED
        order.approved_by_id = user.id
        order.approved_at = utc_now()

    if body.procurement_notes:
        order.procurement_notes = body.procurement_notes
    await repos.service_orders.add(order)
    await repos.notifications.notify(
        order.requested_by_id,
        DECISION_TITLES[body.action],
        body.procurement_notes or f"Your service order is now {ServiceOrderStatus(order.status).value}.",
        type=NotificationType.SERVICE_ORDER_UPDATE,
    )
    await repos.commit()
    await repos.service_orders.refresh(order)
    logger.info(f"Service order {order.id}: {body.action.value} by {user.username}")
    return ok(request, service_order_read(order, await repos.service_orders.get_items(order.id)))
