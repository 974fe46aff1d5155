"""Resolve the error response attributes for a caught exception.

Every caught error is first classified into exactly one variant:

* ``DomainFailure``: the error declares its own status, code and field errors.
* ``ValidationFailure``: the framework or a validator rejected the request input.
* ``Unclassified``: anything else. Its message is never surfaced to the client.

The attribute rules then branch on the variant only.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from datetime import timezone
from http import HTTPStatus
from typing import Any
from typing import Union

from fastapi import status
from fastapi.exceptions import RequestValidationError

from service_common.core.context import RequestContext
from service_common.core.exceptions import DomainError
from service_common.core.exceptions import MediaTypeError
from service_common.core.exceptions import MediaTypeNotAcceptableError
from service_common.core.exceptions import MediaTypeNotSupportedError
from service_common.schemas.error import FieldError
from service_common.validation.validators import BindingResultError

UNKNOWN = "UNKNOWN"
UNHANDLED_ERROR_CODE = "99999"

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


@dataclass(frozen=True)
class ValidationFailure:
    object_name: str
    violations: tuple[FieldError, ...]


@dataclass(frozen=True)
class DomainFailure:
    """A domain error, plus its binding result when it is also a validation failure."""

    error: DomainError
    validation: ValidationFailure | None = None


@dataclass(frozen=True)
class Unclassified:
    error: BaseException


ClassifiedError = Union[DomainFailure, ValidationFailure, Unclassified]


@dataclass(frozen=True)
class ErrorAttributes:
    """Field values needed to compose an error response."""

    timestamp: str
    status: int
    code: str
    request_id: str
    request_path: str
    message: str
    details: str | None = None
    field_errors: tuple[FieldError, ...] | None = None


def classify_error(error: BaseException) -> ClassifiedError:
    """Map an exception onto its error variant."""
    if isinstance(error, DomainError):
        validation = _binding_failure(error) if isinstance(error, BindingResultError) else None
        return DomainFailure(error, validation)
    if isinstance(error, BindingResultError):
        return _binding_failure(error)
    if isinstance(error, RequestValidationError):
        return _request_validation_failure(error)
    return Unclassified(error)


def format_timestamp(moment: datetime | None = None) -> str:
    """Format ``moment`` (default: now) as UTC ISO-8601 with millisecond precision."""
    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return f"{moment.strftime('%Y-%m-%dT%H:%M:%S')}.{moment.microsecond // 1000:03d} UTC"


def reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return f"Http Status {status_code}"


def resolve_error_attributes(
    error: BaseException,
    context: RequestContext,
    *,
    now: datetime | None = None,
) -> ErrorAttributes:
    """Resolve status, code, message, details and field errors for ``error``."""
    classified = classify_error(error)
    status_code = _resolve_status(classified)

    return ErrorAttributes(
        timestamp=format_timestamp(now),
        status=status_code,
        code=_resolve_code(classified),
        request_id=_resolve_request_id(context),
        request_path=context.path,
        message=reason_phrase(status_code),
        details=_resolve_details(classified),
        field_errors=_resolve_field_errors(classified),
    )


def resolve_media_type_error_attributes(
    error: MediaTypeError,
    context: RequestContext,
    *,
    now: datetime | None = None,
) -> ErrorAttributes:
    """Resolve attributes for a content negotiation failure."""
    if isinstance(error, MediaTypeNotSupportedError):
        status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    elif isinstance(error, MediaTypeNotAcceptableError):
        status_code = status.HTTP_406_NOT_ACCEPTABLE
    else:
        raise TypeError(f"Unhandled media type error encountered: {type(error).__name__}")

    return ErrorAttributes(
        timestamp=format_timestamp(now),
        status=status_code,
        code=UNHANDLED_ERROR_CODE,
        request_id=_resolve_request_id(context),
        request_path=context.path,
        message=reason_phrase(status_code),
        details=str(error),
    )


def _resolve_status(classified: ClassifiedError) -> int:
    if isinstance(classified, DomainFailure):
        return int(classified.error.http_status)
    if isinstance(classified, ValidationFailure):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _resolve_code(classified: ClassifiedError) -> str:
    if isinstance(classified, DomainFailure):
        return classified.error.error_code or UNKNOWN
    return UNHANDLED_ERROR_CODE


def _resolve_request_id(context: RequestContext) -> str:
    return context.trace_id or UNKNOWN


def _validation_of(classified: ClassifiedError) -> ValidationFailure | None:
    if isinstance(classified, ValidationFailure):
        return classified
    if isinstance(classified, DomainFailure):
        return classified.validation
    return None


def _resolve_details(classified: ClassifiedError) -> str | None:
    validation = _validation_of(classified)
    if validation is not None and validation.violations:
        return f"Validation failed for '{validation.object_name}'. Error count: {len(validation.violations)}"
    if isinstance(classified, DomainFailure):
        return classified.error.message or None
    # Unhandled errors never expose their message
    return None


def _resolve_field_errors(classified: ClassifiedError) -> tuple[FieldError, ...] | None:
    field_errors: tuple[FieldError, ...] | None = None

    validation = _validation_of(classified)
    if validation is not None and validation.violations:
        field_errors = validation.violations

    # Domain-declared field errors replace validation violations.
    # TODO: confirm whether both sources should be merged instead of overwritten.
    if isinstance(classified, DomainFailure) and classified.error.field_errors:
        field_errors = tuple(classified.error.field_errors)

    return field_errors


def _binding_failure(error: BindingResultError) -> ValidationFailure:
    result = error.binding_result
    return ValidationFailure(
        object_name=result.object_name,
        violations=tuple(FieldError(field=item.field, message=item.message) for item in result.field_errors),
    )


def _request_validation_failure(error: RequestValidationError) -> ValidationFailure:
    issues: Sequence[dict[str, Any]] = error.errors()
    violations = tuple(
        FieldError(field=_format_location(issue.get("loc", ())), message=str(issue.get("msg", "Invalid value")))
        for issue in issues
    )
    return ValidationFailure(object_name=_object_name(issues), violations=violations)


def _object_name(issues: Sequence[dict[str, Any]]) -> str:
    prefixes = {str(issue.get("loc", ("request",))[0]) for issue in issues if issue.get("loc")}
    if len(prefixes) == 1:
        return prefixes.pop()
    return "request"


def _format_location(location: tuple[Any, ...] | list[Any] | Any) -> str:
    if not isinstance(location, (tuple, list)):
        return str(location)

    filtered = [str(part) for part in location if part not in _LOCATION_PREFIXES]
    if filtered:
        return ".".join(filtered)

    if not location:
        return "request"

    return str(location[0])
