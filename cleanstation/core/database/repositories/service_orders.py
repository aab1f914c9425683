"""
Service order repositories.

Provides data access for service part requests and their item lines.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.service_orders import ServiceOrder, ServiceOrderItem
from .base import QueryBuilder, SqlRepository


class ServiceOrderRepository(SqlRepository[ServiceOrder]):
    """Repository for service orders."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, ServiceOrder)

    async def search(
        self,
        *,
        requested_by_id: Optional[str] = None,
        statuses: Optional[Sequence[str]] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[ServiceOrder], int]:
        """List service orders newest first.

        Args:
            requested_by_id: Only orders requested by this user
            statuses: Only orders in one of these statuses
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (service orders on the page, total matches)
        """
        stmt = select(ServiceOrder)
        stmt = QueryBuilder.apply_filters(
            stmt,
            ServiceOrder,
            {"requested_by_id": requested_by_id, "status": list(statuses) if statuses else None},
        )
        stmt = stmt.order_by(ServiceOrder.request_timestamp.desc())  # type: ignore[attr-defined]
        return await self._paginate(stmt, page, limit)

    async def get_items(self, service_order_id: str) -> List[ServiceOrderItem]:
        stmt = select(ServiceOrderItem).where(ServiceOrderItem.service_order_id == service_order_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_items_map(self, service_order_ids: List[str]) -> Dict[str, List[ServiceOrderItem]]:
        items: Dict[str, List[ServiceOrderItem]] = {order_id: [] for order_id in service_order_ids}
        if not service_order_ids:
            return items
        stmt = select(ServiceOrderItem).where(
            ServiceOrderItem.service_order_id.in_(service_order_ids)  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        for item in result.scalars().all():
            items[item.service_order_id].append(item)
        return items
