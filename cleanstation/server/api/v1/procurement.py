"""
Procurement Endpoints.

Legs and feet kits of an order are sent to the sink body manufacturer; these
endpoints list what has to go out and track the outsourced parts.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request, status

from cleanstation.core.database.base import utc_now
from cleanstation.core.database.entities.orders import Order, OutsourcedPart
from cleanstation.core.database.entities.users import User
from cleanstation.core.database.repositories import RepoBundle
from cleanstation.core.errors import NotFoundError
from cleanstation.core.logging_config import get_logger
from cleanstation.core.models.domain.enums import OutsourcedPartStatus, UserRole
from cleanstation.core.models.io.orders import OutsourcedPartCreate, OutsourcedPartRead, OutsourcedPartUpdate
from cleanstation.core.rules import procurement
from cleanstation.server.core.database import ReposDep
from cleanstation.server.core.security import require_roles
from cleanstation.server.responses import ApiResponse, ok
from cleanstation.server.services.workflow import get_order_or_404

logger = get_logger(__name__)

router = APIRouter()


async def _record_milestone(
    repos: RepoBundle, order: Order, part: OutsourcedPart, user: User
) -> Optional[str]:
    event = procurement.milestone_event(OutsourcedPartStatus(part.status))
    milestone = procurement.milestone_for(event) if event else None
    if milestone:
        await repos.history.log(
            order.id,
            milestone,
            user_id=user.id,
            notes=f"{part.part_number} x{part.quantity} {OutsourcedPartStatus(part.status).value.lower()}",
        )
    return milestone


@router.get(
    "/{order_id}/procurement",
    response_model=ApiResponse[Dict[str, Any]],
    summary="Order Procurement",
    description="Legs and feet kits to outsource for an order, merged with their tracking status.",
)
async def get_procurement(
    order_id: str,
    request: Request,
    repos: ReposDep,
    user: User = Depends(
        require_roles(UserRole.ADMIN, UserRole.PROCUREMENT_SPECIALIST, UserRole.PRODUCTION_COORDINATOR)
    ),
):
    """
    Get procurement data of an order.

    Kits come from the stored BOM; orders without a stored BOM fall back to
    their sink configurations.
    """
    order = await get_order_or_404(repos, order_id)
    bom_items = await repos.bom_items.list_for_order(order.id)
    if bom_items:
        extracted = procurement.extract_legs_and_feet(
            {"id": item.item_id, "name": item.name, "quantity": item.quantity} for item in bom_items
        )
    else:
        extracted = procurement.extract_from_configurations(order.sink_configurations)
    tracked = [p.model_dump(mode="json") for p in await repos.outsourced.list_for_order(order.id)]
    parts = procurement.merge_parts(extracted, tracked)
    return ok(
        request,
        {
            "order_id": order.id,
            "po_number": order.po_number,
            "order_status": order.order_status,
            "legs_and_feet": extracted,
            "parts": parts,
            "summary": procurement.summarize(parts),
            "procurement_needed": procurement.procurement_needed(extracted),
        },
    )


@router.post(
    "/{order_id}/outsourced-parts",
    response_model=ApiResponse[Dict[str, Any]],
    status_code=status.HTTP_201_CREATED,
    summary="Track Outsourced Part",
    description="Start tracking a part sent to an external manufacturer.",
)
async def create_outsourced_part(
    order_id: str,
    body: OutsourcedPartCreate,
    request: Request,
    repos: ReposDep,
    user: User = Depends(require_roles(UserRole.ADMIN, UserRole.PROCUREMENT_SPECIALIST)),
):
    """
    Track an outsourced part.

    A part created as SENT records the PROCUREMENT_STARTED milestone on the
    order history; RECEIVED records MANUFACTURING_SCHEDULING.
    """
    order = await get_order_or_404(repos, order_id)
    data = body.model_dump(exclude_none=True)
    part = OutsourcedPart(order_id=order.id, marked_by_id=user.id, **data)
    await repos.outsourced.add(part)
    milestone = await _record_milestone(repos, order, part, user)
    await repos.commit()
    await repos.outsourced.refresh(part)
    logger.info(f"Tracking outsourced part {part.part_number} for order {order.po_number}")
    return ok(request, {"part": OutsourcedPartRead.model_validate(part), "milestone": milestone})


@router.put(
    "/{order_id}/outsourced-parts/{part_id}",
    response_model=ApiResponse[Dict[str, Any]],
    summary="Update Outsourced Part",
    description="Update the tracking status of an outsourced part.",
    responses={404: {"description": "Order or part not found"}},
)
async def update_outsourced_part(
    order_id: str,
    part_id: str,
    body: OutsourcedPartUpdate,
    request: Request,
    repos: ReposDep,
    user: User = Depends(require_roles(UserRole.ADMIN, UserRole.PROCUREMENT_SPECIALIST)),
):
    """
    Update an outsourced part.

    Marking a part RECEIVED without an actual return date stamps the
    current time.
    """
    order = await get_order_or_404(repos, order_id)
    part = await repos.outsourced.get_for_order(order.id, part_id)
    if part is None:
        raise NotFoundError("Outsourced part", part_id)
    previous = OutsourcedPartStatus(part.status)
    for key, value in body.model_dump(exclude_unset=True).items():
        setattr(part, key, value)
    part.marked_by_id = user.id
    if part.status == OutsourcedPartStatus.RECEIVED and part.actual_return_date is None:
        part.actual_return_date = utc_now()
    await repos.outsourced.add(part)
    milestone = None
    if OutsourcedPartStatus(part.status) != previous:
        milestone = await _record_milestone(repos, order, part, user)
    await repos.commit()
    await repos.outsourced.refresh(part)
    return ok(request, {"part": OutsourcedPartRead.model_validate(part), "milestone": milestone})
