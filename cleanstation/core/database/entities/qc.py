"""
Quality control entity models.

QC form templates are versioned checklists. A template is identified for
versioning purposes by its ``name`` and ``applies_to_product_family``; each
version is a separate row. Submitting a form for an order stores one
``OrderQcResult`` per (order, template) with a row per answered item.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import JSON, Field

from cleanstation.core.models.domain.enums import QcItemType, QcStatus

from ..base import Base, new_id, utc_now


class QcFormTemplateBase(Base):
    """Base fields for QC form template entity."""

    name: str = Field(max_length=255, index=True, description="Form name, e.g. 'Pre-Production Check'")
    form_type: Optional[str] = Field(default=None, max_length=64, description="PRE_QC, FINAL_QC, TESTING, ...")
    version: str = Field(default="1.0", max_length=32)
    description: Optional[str] = Field(default=None)
    applies_to_product_family: Optional[str] = Field(default=None, max_length=64, index=True)
    is_active: bool = Field(default=True)


class QcFormTemplate(QcFormTemplateBase, table=True):
    """Versioned QC checklist definition.

    Table: cs_qc_form_templates
    """

    __tablename__ = "cs_qc_form_templates"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"QcFormTemplate(id={self.id}, name={self.name}, version={self.version})"


class QcFormTemplateItemBase(Base):
    """Base fields for a checklist line."""

    section: str = Field(max_length=128)
    checklist_item: str = Field(description="Text shown to the inspector")
    item_type: QcItemType = Field(default=QcItemType.PASS_FAIL)
    options: Optional[List[str]] = Field(default=None, sa_type=JSON)
    expected_value: Optional[str] = Field(default=None)
    order: int = Field(default=0)
    is_required: bool = Field(default=True)
    repeat_per: Optional[str] = Field(default=None, max_length=64, description="e.g. 'basin' to repeat per basin")
    applicability_condition: Optional[str] = Field(default=None)
    related_part_number: Optional[str] = Field(default=None, max_length=128)
    related_assembly_id: Optional[str] = Field(default=None, max_length=128)
    default_value: Optional[str] = Field(default=None)
    notes_prompt: Optional[str] = Field(default=None)


class QcFormTemplateItem(QcFormTemplateItemBase, table=True):
    """Checklist line belonging to a template.

    Table: cs_qc_form_template_items
    """

    __tablename__ = "cs_qc_form_template_items"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    template_id: str = Field(foreign_key="cs_qc_form_templates.id", index=True, max_length=64)


class OrderQcResult(Base, table=True):
    """Submitted QC form for an order.

    Table: cs_order_qc_results
    """

    __tablename__ = "cs_order_qc_results"
    __table_args__ = (UniqueConstraint("order_id", "template_id", name="uq_cs_order_qc_results_order_template"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    order_id: str = Field(foreign_key="cs_orders.id", index=True, max_length=64)
    template_id: str = Field(foreign_key="cs_qc_form_templates.id", index=True, max_length=64)
    build_number: Optional[str] = Field(default=None, max_length=64)
    overall_status: QcStatus = Field(default=QcStatus.NOT_STARTED)
    qc_performed_by_id: Optional[str] = Field(default=None, foreign_key="cs_users.id", max_length=64)
    qc_timestamp: datetime = Field(default_factory=utc_now)
    notes: Optional[str] = Field(default=None)
    external_job_id: Optional[str] = Field(default=None, max_length=128)
    digital_signature: Optional[str] = Field(default=None, max_length=255)


class OrderQcItemResult(Base, table=True):
    """Answer to a single checklist line.

    Table: cs_order_qc_item_results
    """

    __tablename__ = "cs_order_qc_item_results"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    qc_result_id: str = Field(foreign_key="cs_order_qc_results.id", index=True, max_length=64)
    template_item_id: str = Field(foreign_key="cs_qc_form_template_items.id", max_length=64)
    result_value: Optional[str] = Field(default=None)
    is_conforming: Optional[bool] = Field(default=None)
    notes: Optional[str] = Field(default=None)
    is_not_applicable: bool = Field(default=False)
