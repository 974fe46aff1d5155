"""Per-value validator dispatch for request payloads."""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from collections.abc import Callable
from collections.abc import Mapping
from typing import Any
from typing import Protocol
from typing import runtime_checkable

from fastapi import FastAPI
from fastapi import Request

from service_common.schemas.error import FieldError

ValidatorFactory = Callable[[], "Validator"]


class BindingResult:
    """Ordered collection of field errors recorded while validating one object."""

    def __init__(self, object_name: str) -> None:
        self.object_name = object_name
        self.field_errors: list[FieldError] = []

    def reject_value(self, field: str, message: str, code: str | None = None) -> None:
        self.field_errors.append(FieldError(field=field, code=code, message=message))

    @property
    def error_count(self) -> int:
        return len(self.field_errors)

    def has_errors(self) -> bool:
        return self.error_count > 0


class BindingResultError(Exception):
    """Raised when a validated value produced one or more field errors."""

    def __init__(self, binding_result: BindingResult) -> None:
        super().__init__(
            f"Validation failed for '{binding_result.object_name}'. Error count: {binding_result.error_count}"
        )
        self.binding_result = binding_result


class Validator(ABC):
    """Validates a target object, recording failures in a ``BindingResult``.

    Subclasses list the attribute names they need in ``dependencies``; the
    ``GlobalValidator`` injects them before ``validate`` runs.
    """

    dependencies: tuple[str, ...] = ()

    @abstractmethod
    def validate(self, target: Any, errors: BindingResult) -> None:
        """Record every problem with ``target`` in ``errors``."""


@runtime_checkable
class ValidatorSupport(Protocol):
    """A value that knows which validator is responsible for it."""

    def validator(self) -> Validator | None: ...


class GlobalValidator:
    """Resolve the validator for a value and run it.

    Validators are looked up in the explicit registry first (by type, along the
    MRO) and then through the value's own ``validator()`` method.
    """

    def __init__(
        self,
        dependencies: Mapping[str, Any] | None = None,
        registry: Mapping[type, ValidatorFactory] | None = None,
    ) -> None:
        self._dependencies = dict(dependencies or {})
        self._registry: dict[type, ValidatorFactory] = dict(registry or {})

    def register(self, kind: type, factory: ValidatorFactory) -> None:
        self._registry[kind] = factory

    def resolve(self, target: Any) -> Validator | None:
        for kind in type(target).__mro__:
            factory = self._registry.get(kind)
            if factory is not None:
                return self._autowire(factory())

        if isinstance(target, ValidatorSupport):
            validator = target.validator()
            if validator is not None:
                return self._autowire(validator)

        return None

    def validate(self, target: Any, errors: BindingResult) -> None:
        validator = self.resolve(target)
        if validator is None:
            return
        validator.validate(target, errors)

    def check(self, target: Any, object_name: str | None = None) -> BindingResult:
        """Validate ``target`` and raise ``BindingResultError`` if anything was rejected."""
        errors = BindingResult(object_name or _default_object_name(target))
        self.validate(target, errors)
        if errors.has_errors():
            raise BindingResultError(errors)
        return errors

    def _autowire(self, validator: Validator) -> Validator:
        for name in validator.dependencies:
            if name not in self._dependencies:
                raise LookupError(f"No dependency named '{name}' is available for {type(validator).__name__}")
            setattr(validator, name, self._dependencies[name])
        return validator


def _default_object_name(target: Any) -> str:
    name = type(target).__name__
    return name[:1].lower() + name[1:]


def register_global_validator(app: FastAPI, validator: GlobalValidator) -> None:
    """Make ``validator`` available to routes through ``get_global_validator``."""
    app.state.global_validator = validator


def get_global_validator(request: Request) -> GlobalValidator:
    """Route dependency returning the application's global validator."""
    validator = getattr(request.app.state, "global_validator", None)
    if validator is None:
        raise RuntimeError("No global validator registered on this application")
    return validator
