"""
QC Template Administration Endpoints.

Versioned QC checklist templates. ADMIN writes; ADMIN, PRODUCTION_COORDINATOR
and QC_PERSON read.
"""

import re
from typing import Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, Query, Request, status

from cleanstation.core.database.entities.qc import QcFormTemplate, QcFormTemplateItem
from cleanstation.core.database.repositories import RepoBundle
from cleanstation.core.errors import BusinessRuleError, NotFoundError
from cleanstation.core.logging_config import get_logger
from cleanstation.core.models.domain.enums import UserRole
from cleanstation.core.models.io.qc import (
    QcResultRead,
    QcTemplateClone,
    QcTemplateCreate,
    QcTemplateDetail,
    QcTemplateGroup,
    QcTemplateItemIn,
    QcTemplateItemRead,
    QcTemplateRead,
    QcTemplateUpdate,
    QcTemplateUsage,
)
from cleanstation.server.core.database import ReposDep
from cleanstation.server.core.security import require_roles
from cleanstation.server.responses import ApiResponse, MessageData, ok

logger = get_logger(__name__)

router = APIRouter()

_readers = require_roles(UserRole.ADMIN, UserRole.PRODUCTION_COORDINATOR, UserRole.QC_PERSON)
_admins = require_roles(UserRole.ADMIN)


def version_key(version: str) -> Tuple[int, ...]:
    """Sort key comparing dotted versions numerically (``1.10`` > ``1.9``)."""
    return tuple(int(part) if part.isdigit() else 0 for part in re.split(r"[.\-]", version))


def next_version(version: str) -> str:
    parts = version.split(".")
    if parts[-1].isdigit():
        parts[-1] = str(int(parts[-1]) + 1)
        return ".".join(parts)
    return f"{version}.1"


async def template_read(repos: RepoBundle, template: QcFormTemplate) -> QcTemplateRead:
    return QcTemplateRead(
        **template.model_dump(), item_count=await repos.qc_templates.item_count(template.id)
    )


async def template_detail(repos: RepoBundle, template: QcFormTemplate) -> QcTemplateDetail:
    items = await repos.qc_templates.get_items(template.id)
    return QcTemplateDetail(
        **template.model_dump(),
        item_count=len(items),
        items=[QcTemplateItemRead.model_validate(i) for i in items],
    )


async def _get_template(repos: RepoBundle, template_id: str) -> QcFormTemplate:
    template = await repos.qc_templates.get_by_id(template_id)
    if template is None:
        raise NotFoundError("QC template", template_id)
    return template


async def _add_items(repos: RepoBundle, template_id: str, items: List[QcTemplateItemIn]) -> None:
    for index, item in enumerate(items):
        data = item.model_dump()
        if data["order"] is None:
            data["order"] = index + 1
        await repos.qc_templates.add(QcFormTemplateItem(template_id=template_id, **data))


@router.get(
    "",
    response_model=ApiResponse[List[QcTemplateGroup]],
    summary="List QC Templates",
    description="List templates grouped by name and product family with versions newest first.",
    dependencies=[Depends(_readers)],
)
async def list_templates(
    request: Request,
    repos: ReposDep,
    include_inactive: bool = Query(False, alias="includeInactive"),
    product_family: Optional[str] = Query(None, alias="productFamily"),
):
    """
    List QC templates.

    - **includeInactive**: Also list deactivated templates.
    - **productFamily**: Only templates for this product family.
    """
    templates = await repos.qc_templates.list_templates(
        include_inactive=include_inactive, product_family=product_family
    )
    groups: Dict[Tuple[str, Optional[str]], List[QcTemplateRead]] = {}
    for template in templates:
        key = (template.name, template.applies_to_product_family)
        groups.setdefault(key, []).append(await template_read(repos, template))

    data = []
    for (name, family), versions in groups.items():
        versions.sort(key=lambda t: version_key(t.version), reverse=True)
        data.append(QcTemplateGroup(name=name, applies_to_product_family=family, latest=versions[0], versions=versions))
    return ok(request, data)


@router.post(
    "",
    response_model=ApiResponse[QcTemplateDetail],
    status_code=status.HTTP_201_CREATED,
    summary="Create QC Template",
    dependencies=[Depends(_admins)],
)
async def create_template(body: QcTemplateCreate, request: Request, repos: ReposDep):
    """
    Create a QC template with its checklist items.

    - **name** / **appliesToProductFamily**: Identify the template line; each
      version is a separate template.
    - **items**: Checklist lines; missing ``order`` values follow the list order.
    """
    template = QcFormTemplate.model_validate(body.model_dump(exclude={"items"}))
    await repos.qc_templates.add(template)
    await _add_items(repos, template.id, body.items)
    await repos.commit()
    logger.info(f"Created QC template {template.name} v{template.version} with {len(body.items)} items")
    return ok(request, await template_detail(repos, template))


@router.get(
    "/{template_id}",
    response_model=ApiResponse[QcTemplateDetail],
    summary="Get QC Template",
    responses={404: {"description": "Template not found"}},
    dependencies=[Depends(_readers)],
)
async def get_template(template_id: str, request: Request, repos: ReposDep):
    return ok(request, await template_detail(repos, await _get_template(repos, template_id)))


@router.put(
    "/{template_id}",
    response_model=ApiResponse[QcTemplateDetail],
    summary="Update QC Template",
    description="Update template fields; a supplied item list replaces the checklist.",
    responses={422: {"description": "Items of a template with results cannot be replaced"}},
    dependencies=[Depends(_admins)],
)
async def update_template(template_id: str, body: QcTemplateUpdate, request: Request, repos: ReposDep):
    template = await _get_template(repos, template_id)
    changes = body.model_dump(exclude_unset=True, exclude={"items"})
    for key, value in changes.items():
        setattr(template, key, value)
    await repos.qc_templates.add(template)
    if body.items is not None:
        if await repos.qc_templates.usage_count(template_id):
            raise BusinessRuleError("Template is referenced by QC results; clone it to change its items")
        await repos.qc_templates.delete_items(template_id)
        await _add_items(repos, template_id, body.items)
    await repos.commit()
    await repos.qc_templates.refresh(template)
    return ok(request, await template_detail(repos, template))


@router.delete(
    "/{template_id}",
    response_model=ApiResponse[MessageData],
    summary="Delete QC Template",
    responses={400: {"description": "Template is referenced by QC results"}},
    dependencies=[Depends(_admins)],
)
async def delete_template(template_id: str, request: Request, repos: ReposDep):
    """Delete a template and its items; refused while QC results reference it."""
    template = await _get_template(repos, template_id)
    usage = await repos.qc_templates.usage_count(template_id)
    if usage:
        raise BusinessRuleError(
            f"Template is used by {usage} QC results and cannot be deleted; deactivate it instead",
            details={"usage_count": usage},
            status_code=400,
        )
    await repos.qc_templates.delete_items(template_id)
    await repos.qc_templates.remove(template)
    await repos.commit()
    return ok(request, MessageData(message=f"Template {template.name} v{template.version} deleted"))


@router.post(
    "/{template_id}/clone",
    response_model=ApiResponse[QcTemplateDetail],
    status_code=status.HTTP_201_CREATED,
    summary="Clone QC Template",
    description="Copy a template and its items, by default as the next version of the same template.",
    dependencies=[Depends(_admins)],
)
async def clone_template(
    template_id: str, request: Request, repos: ReposDep, body: Optional[QcTemplateClone] = None
):
    source = await _get_template(repos, template_id)
    body = body or QcTemplateClone()
    family = body.applies_to_product_family or source.applies_to_product_family
    name = body.name or source.name
    version = body.version
    if version is None:
        existing = await repos.qc_templates.list_versions(name, family)
        latest = max((t.version for t in existing), key=version_key, default=source.version)
        version = next_version(latest)

    clone = QcFormTemplate(
        name=name,
        form_type=source.form_type,
        version=version,
        description=source.description,
        applies_to_product_family=family,
        is_active=True,
    )
    await repos.qc_templates.add(clone)
    for item in await repos.qc_templates.get_items(source.id):
        await repos.qc_templates.add(
            QcFormTemplateItem(template_id=clone.id, **item.model_dump(exclude={"id", "template_id"}))
        )
    await repos.commit()
    logger.info(f"Cloned QC template {source.id} as {clone.name} v{clone.version}")
    return ok(request, await template_detail(repos, clone))


@router.get(
    "/{template_id}/versions",
    response_model=ApiResponse[List[QcTemplateRead]],
    summary="QC Template Versions",
    description="Every version sharing the template's name and product family, newest first.",
    dependencies=[Depends(_readers)],
)
async def list_template_versions(template_id: str, request: Request, repos: ReposDep):
    template = await _get_template(repos, template_id)
    versions = await repos.qc_templates.list_versions(template.name, template.applies_to_product_family)
    versions.sort(key=lambda t: version_key(t.version), reverse=True)
    return ok(request, [await template_read(repos, t) for t in versions])


@router.get(
    "/{template_id}/usage",
    response_model=ApiResponse[QcTemplateUsage],
    summary="QC Template Usage",
    description="How many QC results reference the template, with the most recent ones.",
    dependencies=[Depends(_readers)],
)
async def get_template_usage(template_id: str, request: Request, repos: ReposDep):
    await _get_template(repos, template_id)
    usage = await repos.qc_templates.usage_count(template_id)
    recent = await repos.qc_results.list_for_template(template_id)
    return ok(
        request,
        QcTemplateUsage(
            template_id=template_id,
            usage_count=usage,
            can_delete=usage == 0,
            recent_results=[QcResultRead.model_validate(r) for r in recent],
        ),
    )
