"""Error response schemas shared across exception handlers."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class FieldError(BaseModel):
    """Single field-level validation or domain issue."""

    field: str
    code: str | None = None
    message: str


class Resource(BaseModel):
    """Deployment identity of the service instance that produced the error."""

    datacenter: str | None = None
    environment: str | None = None
    region: str | None = None
    name: str | None = None
    version: str | None = None


class ErrorResponse(BaseModel):
    """Top-level API error response body."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    timestamp: str
    status: int
    code: str
    resource: Resource
    request_id: str = Field(alias="requestId")
    request_path: str = Field(alias="requestPath")
    message: str
    details: str | None = None
    field_errors: list[FieldError] | None = Field(default=None, alias="fieldErrors")

    def to_payload(self) -> dict:
        """Serialize with wire field names, omitting absent members."""
        return self.model_dump(by_alias=True, exclude_none=True)
