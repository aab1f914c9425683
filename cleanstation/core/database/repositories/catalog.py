"""
Catalog repositories.

Provides data access for parts, assemblies and assembly component links,
including the catalog lookups used by the BOM generator.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.catalog import Assembly, AssemblyComponent, Part
from .base import QueryBuilder, SqlRepository

_PART_SORT_COLUMNS = {
    "name": Part.name,
    "partId": Part.part_id,
    "part_id": Part.part_id,
}


class PartRepository(SqlRepository[Part]):
    """Repository for catalog parts."""

    pk_field = "part_id"

    def __init__(self, session: AsyncSession):
        super().__init__(session, Part)

    async def get_many(self, part_ids: List[str]) -> List[Part]:
        if not part_ids:
            return []
        stmt = select(Part).where(Part.part_id.in_(part_ids))  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def browse(
        self,
        *,
        search: Optional[str] = None,
        part_type: Optional[str] = None,
        status: Optional[str] = None,
        sort_by: str = "name",
        sort_order: str = "asc",
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Part], int]:
        """Search the parts catalog.

        Args:
            search: Case-insensitive match on name, part number or manufacturer part number
            part_type: Filter on part type
            status: Filter on part status
            sort_by: ``name`` or ``partId``
            sort_order: ``asc`` or ``desc``
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (parts on the page, total matches)
        """
        stmt = select(Part)
        stmt = QueryBuilder.apply_search(stmt, [Part.name, Part.part_id, Part.manufacturer_part_number], search)
        stmt = QueryBuilder.apply_filters(stmt, Part, {"type": part_type, "status": status})
        column = _PART_SORT_COLUMNS.get(sort_by, Part.name)
        stmt = stmt.order_by(column.desc() if sort_order == "desc" else column.asc())
        return await self._paginate(stmt, page, limit)


class AssemblyRepository(SqlRepository[Assembly]):
    """Repository for assemblies and their component lists."""

    pk_field = "assembly_id"

    def __init__(self, session: AsyncSession):
        super().__init__(session, Assembly)

    async def get_components(self, assembly_id: str) -> List[AssemblyComponent]:
        """Get the component links of an assembly in insertion order."""
        stmt = (
            select(AssemblyComponent)
            .where(AssemblyComponent.parent_assembly_id == assembly_id)
            .order_by(AssemblyComponent.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_component(self, component: AssemblyComponent) -> AssemblyComponent:
        return await self.add(component)

    async def search(
        self,
        *,
        search: Optional[str] = None,
        assembly_type: Optional[str] = None,
        category_code: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Assembly], int]:
        stmt = select(Assembly)
        stmt = QueryBuilder.apply_search(stmt, [Assembly.name, Assembly.assembly_id], search)
        stmt = QueryBuilder.apply_filters(stmt, Assembly, {"type": assembly_type, "category_code": category_code})
        stmt = stmt.order_by(Assembly.assembly_id)
        return await self._paginate(stmt, page, limit)


class SqlCatalog:
    """Catalog lookups for the BOM generator backed by the repositories."""

    def __init__(self, session: AsyncSession):
        self.parts = PartRepository(session)
        self.assemblies = AssemblyRepository(session)

    async def get_assembly(self, assembly_id: str) -> Optional[Assembly]:
        return await self.assemblies.get_by_id(assembly_id)

    async def get_part(self, part_id: str) -> Optional[Part]:
        return await self.parts.get_by_id(part_id)

    async def get_components(self, assembly_id: str) -> List[AssemblyComponent]:
        return await self.assemblies.get_components(assembly_id)
