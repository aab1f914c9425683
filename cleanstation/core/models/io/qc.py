"""
QC template and QC result I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from cleanstation.core.models.domain.enums import QcItemType, QcStatus

from .common import ReadModel, RequestModel


class QcTemplateItemIn(RequestModel):
    section: str = Field(min_length=1, max_length=128)
    checklist_item: str = Field(min_length=1)
    item_type: QcItemType = QcItemType.PASS_FAIL
    options: Optional[List[str]] = None
    expected_value: Optional[str] = None
    order: Optional[int] = None
    is_required: bool = True
    repeat_per: Optional[str] = None
    applicability_condition: Optional[str] = None
    related_part_number: Optional[str] = None
    related_assembly_id: Optional[str] = None
    default_value: Optional[str] = None
    notes_prompt: Optional[str] = None


class QcTemplateItemRead(ReadModel):
    id: str
    template_id: str
    section: str
    checklist_item: str
    item_type: QcItemType
    options: Optional[List[str]] = None
    expected_value: Optional[str] = None
    order: int
    is_required: bool
    repeat_per: Optional[str] = None
    applicability_condition: Optional[str] = None
    related_part_number: Optional[str] = None
    related_assembly_id: Optional[str] = None
    default_value: Optional[str] = None
    notes_prompt: Optional[str] = None


class QcTemplateCreate(RequestModel):
    """Schema for creating a QC template with its checklist items."""

    name: str = Field(min_length=1, max_length=255)
    form_type: Optional[str] = None
    version: str = Field(default="1.0", max_length=32)
    description: Optional[str] = None
    applies_to_product_family: Optional[str] = None
    is_active: bool = True
    items: List[QcTemplateItemIn] = Field(default_factory=list)


class QcTemplateUpdate(RequestModel):
    """Schema for updating a template; ``items`` replaces the whole checklist."""

    name: Optional[str] = None
    form_type: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None
    applies_to_product_family: Optional[str] = None
    is_active: Optional[bool] = None
    items: Optional[List[QcTemplateItemIn]] = None


class QcTemplateClone(RequestModel):
    name: Optional[str] = None
    version: Optional[str] = None
    applies_to_product_family: Optional[str] = None


class QcTemplateRead(ReadModel):
    id: str
    name: str
    form_type: Optional[str] = None
    version: str
    description: Optional[str] = None
    applies_to_product_family: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    item_count: int = 0


class QcTemplateDetail(QcTemplateRead):
    items: List[QcTemplateItemRead] = Field(default_factory=list)


class QcTemplateGroup(ReadModel):
    """All versions of one template name and product family, newest first."""

    name: str
    applies_to_product_family: Optional[str] = None
    latest: QcTemplateRead
    versions: List[QcTemplateRead]


class QcTemplateUsage(ReadModel):
    template_id: str
    usage_count: int
    can_delete: bool
    recent_results: List["QcResultRead"] = Field(default_factory=list)


class QcItemResultIn(RequestModel):
    template_item_id: str
    result_value: Optional[str] = None
    is_conforming: Optional[bool] = None
    notes: Optional[str] = None
    is_not_applicable: bool = False


class QcSubmission(RequestModel):
    template_id: str
    overall_status: QcStatus
    build_number: Optional[str] = None
    notes: Optional[str] = None
    external_job_id: Optional[str] = None
    digital_signature: Optional[str] = None
    items: List[QcItemResultIn] = Field(default_factory=list)


class QcItemResultRead(ReadModel):
    id: str
    template_item_id: str
    result_value: Optional[str] = None
    is_conforming: Optional[bool] = None
    notes: Optional[str] = None
    is_not_applicable: bool


class QcResultRead(ReadModel):
    id: str
    order_id: str
    template_id: str
    build_number: Optional[str] = None
    overall_status: QcStatus
    qc_performed_by_id: Optional[str] = None
    qc_timestamp: datetime
    notes: Optional[str] = None
    external_job_id: Optional[str] = None
    digital_signature: Optional[str] = None


class QcResultDetail(QcResultRead):
    items: List[QcItemResultRead] = Field(default_factory=list)


QcTemplateUsage.model_rebuild()
