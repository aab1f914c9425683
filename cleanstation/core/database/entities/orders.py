"""
Order entity models.

An order groups one or more sinks (build numbers). Each build number has its
own sink configuration and accessory list, stored as JSON on the order. The
history log, persisted BOM lines and outsourced part tracking hang off the
order by foreign key.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlmodel import JSON, Field

from cleanstation.core.models.domain.enums import Language, OrderStatus, OutsourcedPartStatus

from ..base import Base, new_id, utc_now


class OrderBase(Base):
    """Base fields for order entity."""

    po_number: str = Field(max_length=64, unique=True, index=True, description="Customer purchase order number")
    customer_name: str = Field(max_length=255)
    project_name: Optional[str] = Field(default=None, max_length=255)
    sales_person: str = Field(max_length=255)
    want_date: datetime = Field(description="Requested delivery date")
    language: Language = Field(default=Language.EN, description="Manual language")
    notes: Optional[str] = Field(default=None)


class Order(OrderBase, table=True):
    """Production order.

    Table: cs_orders
    """

    __tablename__ = "cs_orders"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    build_numbers: List[str] = Field(default_factory=list, sa_type=JSON)
    sink_configurations: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    accessories: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    order_status: OrderStatus = Field(default=OrderStatus.ORDER_CREATED, index=True)
    current_assignee: Optional[str] = Field(default=None, max_length=64)
    created_by_id: Optional[str] = Field(default=None, foreign_key="cs_users.id", max_length=64)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Order(id={self.id}, po_number={self.po_number}, status={self.order_status})"


class OrderHistoryLog(Base, table=True):
    """Append-only audit trail of order actions.

    Table: cs_order_history_logs
    """

    __tablename__ = "cs_order_history_logs"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    order_id: str = Field(foreign_key="cs_orders.id", index=True, max_length=64)
    user_id: Optional[str] = Field(default=None, foreign_key="cs_users.id", max_length=64)
    action: str = Field(max_length=64)
    old_status: Optional[str] = Field(default=None, max_length=64)
    new_status: Optional[str] = Field(default=None, max_length=64)
    notes: Optional[str] = Field(default=None)
    timestamp: datetime = Field(default_factory=utc_now, index=True)


class BomItem(Base, table=True):
    """One line of an order's persisted, flattened BOM.

    Table: cs_bom_items
    """

    __tablename__ = "cs_bom_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: str = Field(foreign_key="cs_orders.id", index=True, max_length=64)
    position: int = Field(description="Line number within the flattened BOM")
    build_number: Optional[str] = Field(
        default=None, max_length=64, description="Build the line belongs to; None for order-wide items"
    )
    item_id: str = Field(max_length=255, description="Part or assembly number")
    name: str = Field(max_length=255)
    quantity: int = Field(default=1)
    category: str = Field(max_length=64)
    item_type: str = Field(max_length=64)
    indent_level: int = Field(default=0)
    is_custom: bool = Field(default=False)
    is_placeholder: bool = Field(default=False)


class OutsourcedPart(Base, table=True):
    """Part sent out to an external manufacturer for an order.

    Table: cs_outsourced_parts
    """

    __tablename__ = "cs_outsourced_parts"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    order_id: str = Field(foreign_key="cs_orders.id", index=True, max_length=64)
    part_number: str = Field(max_length=128)
    part_name: str = Field(max_length=255)
    quantity: int = Field(default=1, ge=1)
    supplier: str = Field(default="Sink Body Manufacturer", max_length=255)
    status: OutsourcedPartStatus = Field(default=OutsourcedPartStatus.PENDING)
    notes: Optional[str] = Field(default=None)
    expected_return_date: Optional[datetime] = Field(default=None)
    actual_return_date: Optional[datetime] = Field(default=None)
    marked_by_id: Optional[str] = Field(default=None, foreign_key="cs_users.id", max_length=64)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})
