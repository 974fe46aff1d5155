"""Compose and render error responses from resolved attributes."""

from __future__ import annotations

from fastapi.responses import JSONResponse

from service_common.core.error_attributes import ErrorAttributes
from service_common.metadata.deployment import DeploymentContext
from service_common.schemas.error import ErrorResponse
from service_common.schemas.error import Resource


def build_resource(deployment: DeploymentContext) -> Resource:
    datacenter_type = deployment.datacenter_type
    return Resource(
        datacenter=datacenter_type.value if datacenter_type is not None else None,
        environment=deployment.environment,
        region=deployment.region,
        name=deployment.name,
        version=deployment.version,
    )


def compose_error_response(attributes: ErrorAttributes, deployment: DeploymentContext) -> ErrorResponse:
    """Build the error response body for resolved attributes."""
    return ErrorResponse(
        timestamp=attributes.timestamp,
        status=attributes.status,
        code=attributes.code,
        resource=build_resource(deployment),
        request_id=attributes.request_id,
        request_path=attributes.request_path,
        message=attributes.message,
        details=attributes.details,
        field_errors=list(attributes.field_errors) if attributes.field_errors else None,
    )


def render_error_response(response: ErrorResponse) -> JSONResponse:
    """Return ``response`` as JSON using its own status for the transport status."""
    return JSONResponse(status_code=response.status, content=response.to_payload())
