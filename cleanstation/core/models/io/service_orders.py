"""
Service order I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from cleanstation.core.models.domain.enums import ServiceOrderAction, ServiceOrderStatus

from .common import ReadModel, RequestModel


class ServiceOrderItemIn(RequestModel):
    part_id: str
    quantity_requested: int = Field(ge=1)
    notes: Optional[str] = None


class ServiceOrderCreate(RequestModel):
    notes: Optional[str] = None
    items: List[ServiceOrderItemIn] = Field(min_length=1)


class ServiceOrderItemRead(ReadModel):
    id: str
    part_id: str
    quantity_requested: int
    quantity_approved: Optional[int] = None
    notes: Optional[str] = None


class ServiceOrderRead(ReadModel):
    id: str
    requested_by_id: str
    status: ServiceOrderStatus
    notes: Optional[str] = None
    procurement_notes: Optional[str] = None
    approved_by_id: Optional[str] = None
    approved_at: Optional[datetime] = None
    request_timestamp: datetime
    updated_at: datetime
    items: List[ServiceOrderItemRead] = Field(default_factory=list)


class ItemAdjustment(RequestModel):
    item_id: str
    quantity_approved: int = Field(ge=0)
    notes: Optional[str] = None


class ServiceOrderApproval(RequestModel):
    """Approver decision on a pending service order."""

    action: ServiceOrderAction
    procurement_notes: Optional[str] = None
    item_adjustments: List[ItemAdjustment] = Field(default_factory=list)
