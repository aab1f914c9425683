"""
Order QC Endpoints.

Template lookup for an order, QC form submission and stored results.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from cleanstation.core.database import utc_now
from cleanstation.core.database.entities.qc import OrderQcItemResult, OrderQcResult
from cleanstation.core.database.entities.users import User
from cleanstation.core.errors import NotFoundError, ValidationError
from cleanstation.core.logging_config import get_logger
from cleanstation.core.models.domain.enums import OrderStatus, QcStatus, UserRole
from cleanstation.core.models.io.qc import (
    QcItemResultRead,
    QcResultDetail,
    QcResultRead,
    QcSubmission,
    QcTemplateDetail,
)
from cleanstation.core.rules.transitions import next_status_after_qc
from cleanstation.server.core.config import settings
from cleanstation.server.core.database import ReposDep
from cleanstation.server.core.security import CurrentUser, require_roles
from cleanstation.server.responses import ApiResponse, ok
from cleanstation.server.services.workflow import change_order_status, get_order_or_404

from .qc_templates import template_detail

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/{order_id}/qc/template",
    response_model=ApiResponse[QcTemplateDetail],
    summary="QC Template for Order",
    description="Pick the active QC template for the order's product family, falling back to a generic template.",
    responses={404: {"description": "Order not found or no active template"}},
)
async def get_order_qc_template(
    order_id: str,
    request: Request,
    user: CurrentUser,
    repos: ReposDep,
    product_family: Optional[str] = Query(None, alias="productFamily"),
):
    """
    Get the QC template of an order.

    - **productFamily**: Overrides the configured default product family.
    """
    await get_order_or_404(repos, order_id)
    family = product_family or settings.workflow.default_product_family
    template = await repos.qc_templates.find_active(family) or await repos.qc_templates.find_active(None)
    if template is None:
        raise NotFoundError("QC template", family)
    return ok(request, await template_detail(repos, template))


async def _result_detail(repos, result: OrderQcResult) -> QcResultDetail:
    items = await repos.qc_results.get_item_results(result.id)
    return QcResultDetail(
        **QcResultRead.model_validate(result).model_dump(),
        items=[QcItemResultRead.model_validate(i) for i in items],
    )


@router.post(
    "/{order_id}/qc",
    response_model=ApiResponse[QcResultDetail],
    status_code=status.HTTP_201_CREATED,
    summary="Submit QC Results",
    description="Submit or resubmit a QC form for an order; a passed form advances the order.",
    responses={
        400: {"description": "Item does not belong to the template"},
        404: {"description": "Order or template not found"},
    },
)
async def submit_qc(
    order_id: str,
    body: QcSubmission,
    request: Request,
    repos: ReposDep,
    user: User = Depends(require_roles(UserRole.QC_PERSON, UserRole.ADMIN)),
):
    """
    Submit QC results.

    One result is kept per order and template; resubmitting replaces the
    item answers. When **overallStatus** is PASSED the order moves on:
    Pre-QC and "Pre-Production Check" to READY_FOR_PRODUCTION, Final QC and
    "Final Quality Check" to READY_FOR_SHIP, "End-of-Line Testing" to
    READY_FOR_FINAL_QC and anything else to TESTING_COMPLETE.
    """
    order = await get_order_or_404(repos, order_id)
    template = await repos.qc_templates.get_by_id(body.template_id)
    if template is None:
        raise NotFoundError("QC template", body.template_id)
    template_item_ids = {item.id for item in await repos.qc_templates.get_items(template.id)}
    unknown = [item.template_item_id for item in body.items if item.template_item_id not in template_item_ids]
    if unknown:
        raise ValidationError("Items do not belong to the template", details={"template_item_ids": unknown})

    result = await repos.qc_results.get_for_order_template(order.id, template.id)
    if result is None:
        result = OrderQcResult(order_id=order.id, template_id=template.id)
    result.build_number = body.build_number
    result.overall_status = body.overall_status
    result.qc_performed_by_id = user.id
    result.notes = body.notes
    result.external_job_id = body.external_job_id
    result.digital_signature = body.digital_signature
    result.qc_timestamp = utc_now()
    await repos.qc_results.add(result)
    await repos.qc_results.replace_item_results(
        result.id,
        [OrderQcItemResult(qc_result_id=result.id, **item.model_dump()) for item in body.items],
    )

    summary = f"{template.name} submitted as {body.overall_status.value}"
    current = OrderStatus(order.order_status)
    if body.overall_status == QcStatus.PASSED:
        new_status = next_status_after_qc(current, template.name)
        if new_status != current:
            await change_order_status(repos, order, new_status, user, action="QC_COMPLETED", notes=summary)
        else:
            await repos.history.log(order.id, "QC_COMPLETED", user_id=user.id, notes=summary)
    else:
        await repos.history.log(order.id, "QC_SUBMITTED", user_id=user.id, notes=summary)
    await repos.commit()
    await repos.qc_results.refresh(result)
    logger.info(f"Order {order.po_number}: {summary}")
    return ok(request, await _result_detail(repos, result))


@router.get(
    "/{order_id}/qc",
    response_model=ApiResponse[List[QcResultDetail]],
    summary="Order QC Results",
    description="Stored QC results of an order, newest first.",
)
async def get_order_qc_results(order_id: str, request: Request, user: CurrentUser, repos: ReposDep):
    await get_order_or_404(repos, order_id)
    results = await repos.qc_results.list_for_order(order_id)
    return ok(request, [await _result_detail(repos, r) for r in results])
