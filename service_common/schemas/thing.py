"""Schemas for the example thing resource."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import Field

from service_common.validation.validators import BindingResult
from service_common.validation.validators import Validator


class ThingCreate(BaseModel):
    """Payload for creating a thing."""

    name: str = Field(min_length=1, max_length=200)
    tags: list[str] = Field(default_factory=list)

    def validator(self) -> Validator:
        return ThingCreateValidator()


class Thing(BaseModel):
    """Stored thing representation."""

    id: int
    name: str
    tags: list[str]


class ThingSummary(BaseModel):
    id: int
    name: str
    tag_count: int


class ThingCreateValidator(Validator):
    """Rejects blank names, duplicate names and repeated tags."""

    dependencies = ("thing_store",)

    def validate(self, target: ThingCreate, errors: BindingResult) -> None:
        if not target.name.strip():
            errors.reject_value("name", "must not be blank")
        elif self.thing_store.find_by_name(target.name) is not None:
            errors.reject_value("name", "is already in use")

        seen: set[str] = set()
        for index, tag in enumerate(target.tags):
            if tag in seen:
                errors.reject_value(f"tags.{index}", f"duplicate tag '{tag}'")
            seen.add(tag)
