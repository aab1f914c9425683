"""
Standard API response envelope.

Every JSON endpoint answers with::

    {"success": true, "data": ..., "metadata": {...}}
    {"success": false, "error": {"code", "message", "details"}, "metadata": {...}}

``metadata`` carries the timestamp, API version, request id and, for list
endpoints, pagination.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Generic, Optional, TypeVar
from uuid import uuid4

from fastapi import Request
from pydantic import BaseModel, Field

from .core.constant import API_VERSION

T = TypeVar("T")


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_previous: bool


class Metadata(BaseModel):
    timestamp: str
    version: str = API_VERSION
    request_id: str
    pagination: Optional[Pagination] = None


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None


class ApiResponse(BaseModel, Generic[T]):
    """Successful response envelope."""

    success: bool = True
    data: T
    metadata: Metadata


class ApiError(BaseModel):
    """Error response envelope."""

    success: bool = False
    error: ErrorDetail
    metadata: Metadata


def request_id_of(request: Optional[Request]) -> str:
    if request is not None:
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            return request_id
    return uuid4().hex


def paginate(page: int, limit: int, total: int) -> Pagination:
    """Build pagination metadata for a page of ``limit`` items out of ``total``."""
    total_pages = math.ceil(total / limit) if limit else 0
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_previous=page > 1,
    )


def build_metadata(request: Optional[Request], pagination: Optional[Pagination] = None) -> Metadata:
    return Metadata(
        timestamp=datetime.now(timezone.utc).isoformat(),
        request_id=request_id_of(request),
        pagination=pagination,
    )


def ok(request: Request, data: Any, pagination: Optional[Pagination] = None) -> ApiResponse[Any]:
    """Wrap ``data`` in the success envelope."""
    return ApiResponse[Any](data=data, metadata=build_metadata(request, pagination))


def error_content(
    request: Optional[Request], code: str, message: str, details: Optional[Any] = None
) -> dict:
    """Serialized error envelope for a ``JSONResponse``."""
    body = ApiError(
        error=ErrorDetail(code=code, message=message, details=details),
        metadata=build_metadata(request),
    )
    return body.model_dump(mode="json")


class MessageData(BaseModel):
    message: str = Field(description="Human readable outcome")
