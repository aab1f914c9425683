"""
Application error types.

Every error raised on purpose by the service carries a stable error code and an
HTTP status. The server's exception handlers turn these into the standard
``{success: false, error: {...}}`` envelope.
"""

from __future__ import annotations

from typing import Any, Optional


class ErrorCode:
    """Error codes used in the ``error.code`` field of the response envelope."""

    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    RESOURCE_CONFLICT = "RESOURCE_CONFLICT"
    BUSINESS_RULE_VIOLATION = "BUSINESS_RULE_VIOLATION"
    BOM_GENERATION_ERROR = "BOM_GENERATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppError(Exception):
    """Base application error with an error code and HTTP status."""

    code: str = ErrorCode.INTERNAL_ERROR
    status_code: int = 500

    def __init__(self, message: str, details: Optional[Any] = None, status_code: Optional[int] = None) -> None:
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class AuthenticationError(AppError):
    """Raised when the caller is not logged in or the session expired."""

    code = ErrorCode.UNAUTHORIZED
    status_code = 401

    def __init__(self, message: str = "Authentication required", details: Optional[Any] = None) -> None:
        super().__init__(message, details)


class PermissionDeniedError(AppError):
    """Raised when the caller's role may not perform the action."""

    code = ErrorCode.FORBIDDEN
    status_code = 403

    def __init__(self, message: str = "Insufficient permissions", details: Optional[Any] = None) -> None:
        super().__init__(message, details)


class NotFoundError(AppError):
    """Raised when a resource does not exist."""

    code = ErrorCode.NOT_FOUND
    status_code = 404

    def __init__(self, resource: str, resource_id: Any) -> None:
        super().__init__(
            f"{resource} {resource_id} not found",
            details={"resource": resource, "resource_id": str(resource_id)},
        )


class ValidationError(AppError):
    """Raised for malformed input that passed schema validation."""

    code = ErrorCode.VALIDATION_ERROR
    status_code = 400


class BusinessRuleError(AppError):
    """Raised when well-formed input breaks a workflow rule."""

    code = ErrorCode.BUSINESS_RULE_VIOLATION
    status_code = 422


class ConflictError(AppError):
    """Raised when a unique resource already exists."""

    code = ErrorCode.RESOURCE_CONFLICT
    status_code = 409


class BomGenerationError(AppError):
    """Raised when a sink configuration cannot be turned into a BOM."""

    code = ErrorCode.BOM_GENERATION_ERROR
    status_code = 422
