"""
Order repositories.

Provides data access for orders, their history log, persisted BOM lines and
outsourced part tracking.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.orders import BomItem, Order, OrderHistoryLog, OutsourcedPart
from .base import QueryBuilder, SqlRepository


class OrderRepository(SqlRepository[Order]):
    """Repository for production orders."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Order)

    async def get_by_po_number(self, po_number: str) -> Optional[Order]:
        stmt = select(Order).where(Order.po_number == po_number)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def search(
        self,
        *,
        status: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Order], int]:
        """List orders newest first.

        Args:
            status: Filter on order status
            search: Case-insensitive match on PO number, customer or project name
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (orders on the page, total matches)
        """
        stmt = select(Order)
        stmt = QueryBuilder.apply_filters(stmt, Order, {"order_status": status})
        stmt = QueryBuilder.apply_search(stmt, [Order.po_number, Order.customer_name, Order.project_name], search)
        stmt = stmt.order_by(Order.created_at.desc())  # type: ignore[attr-defined]
        return await self._paginate(stmt, page, limit)


class OrderHistoryRepository(SqlRepository[OrderHistoryLog]):
    """Repository for the order audit trail."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, OrderHistoryLog)

    async def log(
        self,
        order_id: str,
        action: str,
        *,
        user_id: Optional[str] = None,
        old_status: Optional[str] = None,
        new_status: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> OrderHistoryLog:
        """Stage a history entry in the current transaction."""
        entry = OrderHistoryLog(
            order_id=order_id,
            user_id=user_id,
            action=action,
            old_status=old_status,
            new_status=new_status,
            notes=notes,
        )
        return await self.add(entry)

    async def list_for_order(self, order_id: str) -> List[OrderHistoryLog]:
        stmt = (
            select(OrderHistoryLog)
            .where(OrderHistoryLog.order_id == order_id)
            .order_by(OrderHistoryLog.timestamp.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class BomItemRepository(SqlRepository[BomItem]):
    """Repository for persisted BOM lines."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, BomItem)

    async def list_for_order(self, order_id: str) -> List[BomItem]:
        stmt = select(BomItem).where(BomItem.order_id == order_id).order_by(BomItem.position)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def replace_for_order(self, order_id: str, items: List[BomItem]) -> List[BomItem]:
        """Stage the removal of an order's BOM lines and the insert of ``items``."""
        for existing in await self.list_for_order(order_id):
            await self.session.delete(existing)
        await self.session.flush()
        self.session.add_all(items)
        await self.session.flush()
        return items


class OutsourcedPartRepository(SqlRepository[OutsourcedPart]):
    """Repository for outsourced part tracking."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, OutsourcedPart)

    async def list_for_order(self, order_id: str) -> List[OutsourcedPart]:
        stmt = (
            select(OutsourcedPart)
            .where(OutsourcedPart.order_id == order_id)
            .order_by(OutsourcedPart.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_for_order(self, order_id: str, outsourced_id: str) -> Optional[OutsourcedPart]:
        stmt = (
            select(OutsourcedPart)
            .where(OutsourcedPart.order_id == order_id)
            .where(OutsourcedPart.id == outsourced_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
