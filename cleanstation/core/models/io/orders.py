"""
Order I/O models for API requests and responses.

Covers order intake, status changes, history, persisted BOM lines and
outsourced part tracking.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator, model_validator

from cleanstation.core.models.domain.configuration import AccessoryItem, SinkConfiguration
from cleanstation.core.models.domain.enums import Language, OrderStatus, OutsourcedPartStatus

from .auth import UserRead
from .common import ReadModel, RequestModel, naive_utc


class OrderCreate(RequestModel):
    """Schema for creating an order.

    Sink configurations and accessories are keyed by build number; every key
    must be one of ``build_numbers``.
    """

    po_number: str = Field(min_length=1, max_length=64)
    build_numbers: List[str] = Field(min_length=1)
    customer_name: str = Field(min_length=1, max_length=255)
    project_name: Optional[str] = None
    sales_person: str = Field(min_length=1, max_length=255)
    want_date: datetime = Field(description="Requested delivery date; must be in the future")
    language: Language = Language.EN
    notes: Optional[str] = None
    sink_configurations: Dict[str, SinkConfiguration] = Field(default_factory=dict)
    accessories: Dict[str, List[AccessoryItem]] = Field(default_factory=dict)

    @field_validator("po_number")
    @classmethod
    def _strip_po_number(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("PO number is required")
        return value

    @field_validator("build_numbers")
    @classmethod
    def _unique_build_numbers(cls, value: List[str]) -> List[str]:
        if any(not number.strip() for number in value):
            raise ValueError("Build numbers must not be empty")
        if len(set(value)) != len(value):
            raise ValueError("Build numbers must be unique")
        return value

    @field_validator("want_date")
    @classmethod
    def _future_want_date(cls, value: datetime) -> datetime:
        aware = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        if aware <= datetime.now(timezone.utc):
            raise ValueError("Want date must be in the future")
        return aware.astimezone(timezone.utc).replace(tzinfo=None)

    @model_validator(mode="after")
    def _keys_are_build_numbers(self) -> "OrderCreate":
        builds = set(self.build_numbers)
        for field_name in ("sink_configurations", "accessories"):
            unknown = set(getattr(self, field_name)) - builds
            if unknown:
                raise ValueError(f"{field_name} keys must be build numbers, unknown: {sorted(unknown)}")
        return self


class OrderRead(ReadModel):
    """Schema for reading an order."""

    id: str
    po_number: str
    build_numbers: List[str]
    customer_name: str
    project_name: Optional[str] = None
    sales_person: str
    want_date: datetime
    language: Language
    notes: Optional[str] = None
    order_status: OrderStatus
    current_assignee: Optional[str] = None
    sink_configurations: Dict[str, Any] = Field(default_factory=dict)
    accessories: Dict[str, Any] = Field(default_factory=dict)
    created_by_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class OrderStatusUpdate(RequestModel):
    new_status: OrderStatus
    notes: Optional[str] = None


class OrderStatusChanged(ReadModel):
    order_id: str
    previous_status: OrderStatus
    new_status: OrderStatus
    notified_users: int = 0


class OrderAssign(RequestModel):
    """Assign an order to a user, or clear the assignment with ``null``."""

    assignee_id: Optional[str]


class OrderAssignment(ReadModel):
    order_id: str
    assignee_id: Optional[str] = None
    assignee: Optional[UserRead] = None
    updated_at: datetime


class OrderHistoryRead(ReadModel):
    id: str
    order_id: str
    user_id: Optional[str] = None
    action: str
    old_status: Optional[str] = None
    new_status: Optional[str] = None
    notes: Optional[str] = None
    timestamp: datetime


class BomItemRead(ReadModel):
    position: int
    build_number: Optional[str] = None
    item_id: str
    name: str
    quantity: int
    category: str
    item_type: str
    indent_level: int
    is_custom: bool
    is_placeholder: bool


class OutsourcedPartCreate(RequestModel):
    part_number: str = Field(min_length=1, max_length=128)
    part_name: str = Field(min_length=1, max_length=255)
    quantity: int = Field(default=1, ge=1)
    supplier: Optional[str] = None
    status: OutsourcedPartStatus = OutsourcedPartStatus.PENDING
    notes: Optional[str] = None
    expected_return_date: Optional[datetime] = None

    normalize_dates = field_validator("expected_return_date")(naive_utc)


class OutsourcedPartUpdate(RequestModel):
    status: Optional[OutsourcedPartStatus] = None
    notes: Optional[str] = None
    expected_return_date: Optional[datetime] = None
    actual_return_date: Optional[datetime] = None

    normalize_dates = field_validator("expected_return_date", "actual_return_date")(naive_utc)


class OutsourcedPartRead(ReadModel):
    id: str
    order_id: str
    part_number: str
    part_name: str
    quantity: int
    supplier: str
    status: OutsourcedPartStatus
    notes: Optional[str] = None
    expected_return_date: Optional[datetime] = None
    actual_return_date: Optional[datetime] = None
    marked_by_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
