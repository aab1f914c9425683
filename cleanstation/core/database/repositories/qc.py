"""
QC repositories.

Provides data access for QC form templates, their items and the results
submitted against orders.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete as sa_delete
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.qc import OrderQcItemResult, OrderQcResult, QcFormTemplate, QcFormTemplateItem
from .base import SqlRepository


class QcTemplateRepository(SqlRepository[QcFormTemplate]):
    """Repository for QC form templates and their items."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, QcFormTemplate)

    async def list_templates(
        self, *, include_inactive: bool = False, product_family: Optional[str] = None
    ) -> List[QcFormTemplate]:
        """List templates ordered by name.

        Args:
            include_inactive: Include templates with ``is_active`` false
            product_family: Only templates for this family

        Returns:
            List of templates
        """
        stmt = select(QcFormTemplate)
        if not include_inactive:
            stmt = stmt.where(QcFormTemplate.is_active == True)  # noqa: E712
        if product_family:
            stmt = stmt.where(QcFormTemplate.applies_to_product_family == product_family)
        stmt = stmt.order_by(QcFormTemplate.name, QcFormTemplate.created_at.desc())  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_items(self, template_id: str) -> List[QcFormTemplateItem]:
        stmt = (
            select(QcFormTemplateItem)
            .where(QcFormTemplateItem.template_id == template_id)
            .order_by(QcFormTemplateItem.order)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_item(self, template_id: str, item_id: str) -> Optional[QcFormTemplateItem]:
        stmt = (
            select(QcFormTemplateItem)
            .where(QcFormTemplateItem.template_id == template_id)
            .where(QcFormTemplateItem.id == item_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_items(self, template_id: str) -> None:
        await self.session.execute(sa_delete(QcFormTemplateItem).where(QcFormTemplateItem.template_id == template_id))

    async def list_versions(self, name: str, product_family: Optional[str]) -> List[QcFormTemplate]:
        """Get every template sharing ``name`` and ``product_family``."""
        stmt = select(QcFormTemplate).where(QcFormTemplate.name == name)
        if product_family is None:
            stmt = stmt.where(QcFormTemplate.applies_to_product_family.is_(None))  # type: ignore[union-attr]
        else:
            stmt = stmt.where(QcFormTemplate.applies_to_product_family == product_family)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_active(self, product_family: Optional[str]) -> Optional[QcFormTemplate]:
        """Get the newest active template for a family (``None`` means generic)."""
        stmt = select(QcFormTemplate).where(QcFormTemplate.is_active == True)  # noqa: E712
        if product_family is None:
            stmt = stmt.where(QcFormTemplate.applies_to_product_family.is_(None))  # type: ignore[union-attr]
        else:
            stmt = stmt.where(QcFormTemplate.applies_to_product_family == product_family)
        stmt = stmt.order_by(QcFormTemplate.created_at.desc()).limit(1)  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_active_by_name(self, name: str) -> Optional[QcFormTemplate]:
        stmt = (
            select(QcFormTemplate)
            .where(QcFormTemplate.name == name)
            .where(QcFormTemplate.is_active == True)  # noqa: E712
            .order_by(QcFormTemplate.created_at.desc())  # type: ignore[attr-defined]
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def usage_count(self, template_id: str) -> int:
        stmt = select(func.count()).select_from(OrderQcResult).where(OrderQcResult.template_id == template_id)
        return (await self.session.execute(stmt)).scalar_one()

    async def item_count(self, template_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(QcFormTemplateItem)
            .where(QcFormTemplateItem.template_id == template_id)
        )
        return (await self.session.execute(stmt)).scalar_one()


class QcResultRepository(SqlRepository[OrderQcResult]):
    """Repository for submitted QC results."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, OrderQcResult)

    async def get_for_order_template(self, order_id: str, template_id: str) -> Optional[OrderQcResult]:
        stmt = (
            select(OrderQcResult)
            .where(OrderQcResult.order_id == order_id)
            .where(OrderQcResult.template_id == template_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_order(self, order_id: str) -> List[OrderQcResult]:
        stmt = (
            select(OrderQcResult)
            .where(OrderQcResult.order_id == order_id)
            .order_by(OrderQcResult.qc_timestamp.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_template(self, template_id: str, limit: int = 20) -> List[OrderQcResult]:
        stmt = (
            select(OrderQcResult)
            .where(OrderQcResult.template_id == template_id)
            .order_by(OrderQcResult.qc_timestamp.desc())  # type: ignore[attr-defined]
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_item_results(self, qc_result_id: str) -> List[OrderQcItemResult]:
        stmt = select(OrderQcItemResult).where(OrderQcItemResult.qc_result_id == qc_result_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def replace_item_results(self, qc_result_id: str, items: List[OrderQcItemResult]) -> None:
        """Stage the replacement of every item result of a submission."""
        await self.session.execute(sa_delete(OrderQcItemResult).where(OrderQcItemResult.qc_result_id == qc_result_id))
        self.session.add_all(items)
        await self.session.flush()
