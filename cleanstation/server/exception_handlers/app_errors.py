"""
Handlers for expected errors.

Application errors, request validation failures, HTTP exceptions and database
integrity violations are turned into the standard error envelope with the
matching status code.
"""

from typing import Any, Dict, List

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from cleanstation.core.errors import AppError, ErrorCode
from cleanstation.core.logging_config import get_logger

from ..responses import error_content

logger = get_logger(__name__)

_HTTP_CODES = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    409: ErrorCode.RESOURCE_CONFLICT,
    422: ErrorCode.VALIDATION_ERROR,
}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.code} in {request.method} {request.url.path}: {exc.message}", exc_info=True)
    else:
        logger.info(f"{exc.code} in {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_content(request, exc.code, exc.message, exc.details),
    )


def _field_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report schema validation failures with one entry per offending field."""
    return JSONResponse(
        status_code=422,
        content=error_content(request, ErrorCode.VALIDATION_ERROR, "Request validation failed", _field_errors(exc)),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_CODES.get(exc.status_code, ErrorCode.INTERNAL_ERROR if exc.status_code >= 500 else "HTTP_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_content(request, code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Unique violations become 409 conflicts; other integrity errors are 400."""
    logger.error(f"IntegrityError in {request.method} {request.url.path}: {exc}", exc_info=True)
    error_msg = str(exc.orig) if exc.orig is not None else str(exc)
    lowered = error_msg.lower()
    if "unique" in lowered or "duplicate" in lowered:
        return JSONResponse(
            status_code=409,
            content=error_content(
                request, ErrorCode.RESOURCE_CONFLICT, "A resource with the same unique values already exists"
            ),
        )
    if "foreign key" in lowered:
        message = "Referenced resource does not exist"
    else:
        message = "Data integrity violation"
    return JSONResponse(status_code=400, content=error_content(request, ErrorCode.VALIDATION_ERROR, message))
