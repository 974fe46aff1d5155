"""Application exception types understood by the error handlers."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Protocol
from typing import runtime_checkable

from fastapi import status

from service_common.schemas.error import FieldError


@runtime_checkable
class DomainError(Protocol):
    """Any error that declares its own HTTP status, error code and field errors.

    Errors matching this protocol are safe to surface: their message is returned
    to the client as the response details.
    """

    http_status: int
    error_code: str | None
    field_errors: list[FieldError]
    message: str

    def add_field_error(self, field: str, message: str, code: str | Enum | None = None) -> None: ...


def _code_value(code: str | Enum | None) -> str | None:
    if isinstance(code, Enum):
        return str(code.value)
    return code


class ServiceError(Exception):
    """Base application exception for explicit API error responses."""

    def __init__(
        self,
        message: str = "",
        *,
        http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str | Enum | None = None,
        field_errors: Sequence[FieldError] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status
        self.error_code = _code_value(error_code)
        self.field_errors = list(field_errors) if field_errors else []

    def add_field_error(self, field: str, message: str, code: str | Enum | None = None) -> None:
        self.field_errors.append(FieldError(field=field, code=_code_value(code), message=message))


class BadRequestError(ServiceError):
    """Convenience exception for rejected client input."""

    def __init__(self, message: str = "Bad request", *, error_code: str | Enum | None = None) -> None:
        super().__init__(message, http_status=status.HTTP_400_BAD_REQUEST, error_code=error_code)


class NotFoundError(ServiceError):
    """Convenience exception for missing resources."""

    def __init__(self, message: str = "Resource not found", *, error_code: str | Enum | None = None) -> None:
        super().__init__(message, http_status=status.HTTP_404_NOT_FOUND, error_code=error_code)


class ConflictError(ServiceError):
    """Convenience exception for state conflicts."""

    def __init__(self, message: str = "Resource conflict", *, error_code: str | Enum | None = None) -> None:
        super().__init__(message, http_status=status.HTTP_409_CONFLICT, error_code=error_code)


class MediaTypeError(Exception):
    """Base class for content negotiation failures."""


class MediaTypeNotSupportedError(MediaTypeError):
    """Raised when the request body content type is not accepted by the route."""


class MediaTypeNotAcceptableError(MediaTypeError):
    """Raised when no acceptable response representation can be produced."""
