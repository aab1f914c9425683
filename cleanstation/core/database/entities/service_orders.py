"""
Service order entity models.

The service department requests replacement parts through service orders;
procurement approves, rejects or sends them back for modification.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from cleanstation.core.models.domain.enums import ServiceOrderStatus

from ..base import Base, new_id, utc_now


class ServiceOrder(Base, table=True):
    """Request for service parts.

    Table: cs_service_orders
    """

    __tablename__ = "cs_service_orders"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    requested_by_id: str = Field(foreign_key="cs_users.id", index=True, max_length=64)
    status: ServiceOrderStatus = Field(default=ServiceOrderStatus.PENDING_APPROVAL, index=True)
    notes: Optional[str] = Field(default=None)
    procurement_notes: Optional[str] = Field(default=None)
    approved_by_id: Optional[str] = Field(default=None, foreign_key="cs_users.id", max_length=64)
    approved_at: Optional[datetime] = Field(default=None)
    request_timestamp: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class ServiceOrderItem(Base, table=True):
    """Part line of a service order.

    Table: cs_service_order_items
    """

    __tablename__ = "cs_service_order_items"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    service_order_id: str = Field(foreign_key="cs_service_orders.id", index=True, max_length=64)
    part_id: str = Field(foreign_key="cs_parts.part_id", max_length=128)
    quantity_requested: int = Field(ge=1)
    quantity_approved: Optional[int] = Field(default=None)
    notes: Optional[str] = Field(default=None)
