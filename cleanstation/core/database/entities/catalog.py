"""
Catalog entity models.

Parts are purchasable leaf items. Assemblies (kits, sub-assemblies) contain
parts and other assemblies through ``AssemblyComponent`` links, which is what
the BOM generator walks recursively.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from cleanstation.core.models.domain.enums import AssemblyType, PartStatus, PartType

from ..base import Base, utc_now


class PartBase(Base):
    """Base fields for part entity."""

    name: str = Field(max_length=255, description="Part description")
    manufacturer_part_number: Optional[str] = Field(default=None, max_length=128)
    manufacturer_name: Optional[str] = Field(default=None, max_length=128)
    type: PartType = Field(default=PartType.COMPONENT)
    status: PartStatus = Field(default=PartStatus.ACTIVE, index=True)


class Part(PartBase, table=True):
    """Purchasable catalog part.

    Table: cs_parts
    """

    __tablename__ = "cs_parts"

    part_id: str = Field(primary_key=True, max_length=128, description="Catalog part number")

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Part(part_id={self.part_id}, name={self.name})"


class AssemblyBase(Base):
    """Base fields for assembly entity."""

    name: str = Field(max_length=255)
    type: AssemblyType = Field(default=AssemblyType.SIMPLE)
    category_code: Optional[str] = Field(default=None, max_length=32, index=True)
    subcategory_code: Optional[str] = Field(default=None, max_length=32)
    can_order: bool = Field(default=True)
    is_kit: bool = Field(default=False)
    status: PartStatus = Field(default=PartStatus.ACTIVE)


class Assembly(AssemblyBase, table=True):
    """Kit or sub-assembly made of parts and other assemblies.

    Table: cs_assemblies
    """

    __tablename__ = "cs_assemblies"

    assembly_id: str = Field(primary_key=True, max_length=128, description="Catalog assembly number")

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Assembly(assembly_id={self.assembly_id}, name={self.name})"


class AssemblyComponent(Base, table=True):
    """One line of an assembly's component list.

    Exactly one of ``child_part_id`` / ``child_assembly_id`` is expected to be
    set; rows with neither are reported as unknown components in the BOM.

    Table: cs_assembly_components
    """

    __tablename__ = "cs_assembly_components"

    id: Optional[int] = Field(default=None, primary_key=True)
    parent_assembly_id: str = Field(foreign_key="cs_assemblies.assembly_id", index=True, max_length=128)
    child_part_id: Optional[str] = Field(default=None, foreign_key="cs_parts.part_id", max_length=128)
    child_assembly_id: Optional[str] = Field(default=None, foreign_key="cs_assemblies.assembly_id", max_length=128)
    quantity: int = Field(default=1, ge=1)
    notes: Optional[str] = Field(default=None)
