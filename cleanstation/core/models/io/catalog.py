"""
Catalog I/O models for parts and assemblies.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, model_validator

from cleanstation.core.models.domain.enums import AssemblyType, PartStatus, PartType

from .common import ReadModel, RequestModel


class PartRead(ReadModel):
    part_id: str
    name: str
    manufacturer_part_number: Optional[str] = None
    manufacturer_name: Optional[str] = None
    type: PartType
    status: PartStatus
    created_at: datetime
    updated_at: datetime


class PartCreate(RequestModel):
    part_id: str = Field(min_length=1, max_length=128)
    name: str = Field(min_length=1, max_length=255)
    manufacturer_part_number: Optional[str] = None
    manufacturer_name: Optional[str] = None
    type: PartType = PartType.COMPONENT
    status: PartStatus = PartStatus.ACTIVE


class ComponentRead(ReadModel):
    id: int
    child_part_id: Optional[str] = None
    child_assembly_id: Optional[str] = None
    quantity: int
    notes: Optional[str] = None


class AssemblyRead(ReadModel):
    assembly_id: str
    name: str
    type: AssemblyType
    category_code: Optional[str] = None
    subcategory_code: Optional[str] = None
    can_order: bool
    is_kit: bool
    status: PartStatus


class AssemblyDetail(AssemblyRead):
    components: List[ComponentRead] = Field(default_factory=list)


class ComponentCreate(RequestModel):
    child_part_id: Optional[str] = None
    child_assembly_id: Optional[str] = None
    quantity: int = Field(default=1, ge=1)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def _one_child(self) -> "ComponentCreate":
        if bool(self.child_part_id) == bool(self.child_assembly_id):
            raise ValueError("Exactly one of child_part_id or child_assembly_id is required")
        return self


class AssemblyCreate(RequestModel):
    assembly_id: str = Field(min_length=1, max_length=128)
    name: str = Field(min_length=1, max_length=255)
    type: AssemblyType = AssemblyType.SIMPLE
    category_code: Optional[str] = None
    subcategory_code: Optional[str] = None
    can_order: bool = True
    is_kit: bool = False
    status: PartStatus = PartStatus.ACTIVE
    components: List[ComponentCreate] = Field(default_factory=list)
