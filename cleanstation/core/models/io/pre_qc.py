"""
Pre-QC workflow I/O models.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from cleanstation.core.models.domain.enums import OrderStatus

from .common import ReadModel, RequestModel


class PreQcInitiate(RequestModel):
    notes: Optional[str] = None


class PreQcComplete(RequestModel):
    """Inspector's Pre-QC verdict.

    ``result`` is checked by the route (PASS or FAIL) so a wrong value is a
    400 validation error rather than a schema error.
    """

    result: str
    notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    rejection_category: Optional[str] = None
    requires_rework: bool = False
    digital_signature: Optional[str] = None


class PreQcTransition(ReadModel):
    order_id: str
    previous_status: OrderStatus
    new_status: OrderStatus
    message: str
    result: Optional[str] = None
    requires_rework: Optional[bool] = Field(default=None)
