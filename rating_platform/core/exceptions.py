"""
Error taxonomy shared by services and endpoints.

Every error is an HTTPException so services can raise it directly and
FastAPI renders it without extra plumbing.
"""
from typing import Any, Optional

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base class: subclasses fix the status code and a default detail."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(self, detail: Any = None, headers: Optional[dict] = None) -> None:
        super().__init__(
            status_code=type(self).status_code,
            detail=detail if detail is not None else self.default_detail,
            headers=headers,
        )


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"


class PermissionDenied(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"


class InternalError(AppError):
    pass


class ValidationFailed(AppError):
    """
    Field-level validation failure.

    The detail is a list of ``{"loc", "msg", "type"}`` dicts, matching what
    FastAPI returns for request body validation.
    """

    status_code = status.HTTP_422_UNPROCESSABLE_CONTENT
    default_detail = "Validation error"

    def __init__(self, violations: list[dict]) -> None:
        self.violations = violations
        super().__init__(detail=violations)

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationFailed":
        """Build an error carrying one violation for *field*."""
        return cls([{"loc": ["body", field], "msg": message, "type": "value_error"}])
