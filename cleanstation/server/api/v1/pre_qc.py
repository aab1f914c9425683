"""
Pre-QC Endpoints.

Generated Pre-QC checklist of a build, and the Pre-QC workflow: the
production coordinator hands a READY_FOR_PRODUCTION order to QC, and QC
passes or fails it.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from cleanstation.core.database.entities.users import User
from cleanstation.core.errors import ValidationError
from cleanstation.core.logging_config import get_logger
from cleanstation.core.models.domain.configuration import SinkConfiguration
from cleanstation.core.models.domain.enums import OrderStatus, UserRole
from cleanstation.core.models.io.pre_qc import PreQcComplete, PreQcInitiate, PreQcTransition
from cleanstation.core.rules.pre_qc import PreQcItem, generate_pre_qc_checklist
from cleanstation.server.core.database import ReposDep
from cleanstation.server.core.security import CurrentUser, require_roles
from cleanstation.server.responses import ApiResponse, ok
from cleanstation.server.services.workflow import change_order_status, get_order_or_404

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/{order_id}/pre-qc/checklist",
    response_model=ApiResponse[List[PreQcItem]],
    summary="Pre-QC Checklist",
    description="Generate the Pre-QC checklist of one build from its sink configuration.",
    responses={400: {"description": "Unknown build number or build without configuration"}},
)
async def get_pre_qc_checklist(
    order_id: str,
    request: Request,
    user: CurrentUser,
    repos: ReposDep,
    build_number: Optional[str] = Query(None, alias="buildNumber"),
):
    """
    Get the generated Pre-QC checklist.

    - **buildNumber**: Build to inspect; defaults to the order's first build.
    """
    order = await get_order_or_404(repos, order_id)
    build = build_number or (order.build_numbers[0] if order.build_numbers else None)
    if build not in order.build_numbers:
        raise ValidationError(f"Build number {build} is not part of order {order.po_number}")
    raw = order.sink_configurations.get(build)
    if raw is None:
        raise ValidationError(f"Build number {build} has no sink configuration")
    return ok(request, generate_pre_qc_checklist(build, SinkConfiguration.model_validate(raw)))


@router.post(
    "/{order_id}/pre-qc",
    response_model=ApiResponse[PreQcTransition],
    summary="Initiate Pre-QC",
    description="Send a READY_FOR_PRODUCTION order to Pre-QC and notify QC.",
    responses={400: {"description": "Order is not READY_FOR_PRODUCTION"}},
)
async def initiate_pre_qc(
    order_id: str,
    request: Request,
    repos: ReposDep,
    body: Optional[PreQcInitiate] = None,
    user: User = Depends(require_roles(UserRole.PRODUCTION_COORDINATOR, UserRole.ADMIN)),
):
    """
    Initiate Pre-QC.

    - **notes**: Optional history note.
    """
    order = await get_order_or_404(repos, order_id)
    previous = OrderStatus(order.order_status)
    if previous != OrderStatus.READY_FOR_PRODUCTION:
        raise ValidationError(
            f"Cannot initiate Pre-QC from {previous.value} status. Order must be READY_FOR_PRODUCTION."
        )
    notes = (body.notes if body else None) or f"Pre-QC initiated by {user.full_name}"
    await change_order_status(
        repos, order, OrderStatus.READY_FOR_PRE_QC, user, action="PRE_QC_INITIATED", notes=notes
    )
    await repos.commit()
    return ok(
        request,
        PreQcTransition(
            order_id=order.id,
            previous_status=previous,
            new_status=OrderStatus.READY_FOR_PRE_QC,
            message="Pre-QC initiated successfully",
        ),
    )


@router.put(
    "/{order_id}/pre-qc",
    response_model=ApiResponse[PreQcTransition],
    summary="Complete Pre-QC",
    description="Record the Pre-QC verdict of an order in READY_FOR_PRE_QC.",
    responses={400: {"description": "Invalid result, missing rejection reason or wrong order status"}},
)
async def complete_pre_qc(
    order_id: str,
    body: PreQcComplete,
    request: Request,
    repos: ReposDep,
    user: User = Depends(require_roles(UserRole.QC_PERSON, UserRole.ADMIN)),
):
    """
    Complete Pre-QC.

    PASS releases the order to production. FAIL sends it to
    ASSEMBLY_REJECTED_PRE_QC when rework is required and back to production
    otherwise.

    - **result**: PASS or FAIL.
    - **rejectionReason**: Required when the result is FAIL.
    - **requiresRework**: Whether a failed order needs rework.
    """
    result = body.result.upper()
    if result not in ("PASS", "FAIL"):
        raise ValidationError("Result must be PASS or FAIL")
    if result == "FAIL" and not body.rejection_reason:
        raise ValidationError("Rejection reason is required when Pre-QC fails")

    order = await get_order_or_404(repos, order_id)
    previous = OrderStatus(order.order_status)
    if previous != OrderStatus.READY_FOR_PRE_QC:
        raise ValidationError(
            f"Cannot complete Pre-QC from {previous.value} status. Order must be READY_FOR_PRE_QC."
        )

    if result == "PASS":
        new_status = OrderStatus.READY_FOR_PRODUCTION
        notes = body.notes or f"Pre-QC passed by {user.full_name}"
    else:
        new_status = OrderStatus.ASSEMBLY_REJECTED_PRE_QC if body.requires_rework else OrderStatus.READY_FOR_PRODUCTION
        parts = [f"Pre-QC failed: {body.rejection_reason}"]
        if body.rejection_category:
            parts.append(f"Category: {body.rejection_category}")
        if body.notes:
            parts.append(body.notes)
        notes = ". ".join(parts)

    await change_order_status(
        repos, order, new_status, user, action=f"PRE_QC_{'PASSED' if result == 'PASS' else 'FAILED'}", notes=notes
    )
    await repos.commit()
    return ok(
        request,
        PreQcTransition(
            order_id=order.id,
            previous_status=previous,
            new_status=new_status,
            result=result,
            requires_rework=body.requires_rework,
            message=f"Pre-QC {'passed' if result == 'PASS' else 'failed'}",
        ),
    )
