"""Exception handler registration for the shared error response."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from service_common.core.context import RequestContext
from service_common.core.error_attributes import ErrorAttributes
from service_common.core.error_attributes import resolve_error_attributes
from service_common.core.error_attributes import resolve_media_type_error_attributes
from service_common.core.error_response import compose_error_response
from service_common.core.error_response import render_error_response
from service_common.core.exceptions import MediaTypeError
from service_common.core.exceptions import ServiceError
from service_common.metadata.deployment import DeploymentContext
from service_common.metadata.deployment import get_deployment_context
from service_common.validation.validators import BindingResultError

logger = logging.getLogger(__name__)


def _deployment(request: Request) -> DeploymentContext:
    deployment = getattr(request.app.state, "deployment_context", None)
    if deployment is None:
        return get_deployment_context()
    return deployment


def _respond(request: Request, attributes: ErrorAttributes) -> JSONResponse:
    return render_error_response(compose_error_response(attributes, _deployment(request)))


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Return explicit domain errors with their declared status and code."""

    return _respond(request, resolve_error_attributes(exc, RequestContext.from_request(request)))


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Normalize FastAPI request validation errors to a 400 response."""

    return _respond(request, resolve_error_attributes(exc, RequestContext.from_request(request)))


async def binding_result_error_handler(request: Request, exc: BindingResultError) -> JSONResponse:
    """Normalize validator dispatch failures to a 400 response."""

    return _respond(request, resolve_error_attributes(exc, RequestContext.from_request(request)))


async def media_type_error_handler(request: Request, exc: MediaTypeError) -> JSONResponse:
    """Map content negotiation failures to 405 or 406."""

    return _respond(request, resolve_media_type_error_attributes(exc, RequestContext.from_request(request)))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Treat framework HTTP errors as domain errors carrying the framework's status."""

    message = exc.detail if isinstance(exc.detail, str) and exc.detail else ""
    error = ServiceError(message, http_status=exc.status_code)
    response = _respond(request, resolve_error_attributes(error, RequestContext.from_request(request)))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Avoid leaking internal exceptions while keeping the response shape stable."""

    # ServerErrorMiddleware re-raises after this handler and the server logs the traceback.
    logger.error(
        "An error was caught by the default error handler on %s: %s",
        request.url.path,
        type(exc).__name__,
    )
    return _respond(request, resolve_error_attributes(exc, RequestContext.from_request(request)))


def register_error_handlers(app: FastAPI, deployment: DeploymentContext | None = None) -> None:
    """Attach all shared error handlers to a FastAPI app instance."""

    app.state.deployment_context = deployment or get_deployment_context()
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(BindingResultError, binding_result_error_handler)
    app.add_exception_handler(MediaTypeError, media_type_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
