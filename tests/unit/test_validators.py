"""Unit tests for global validator dispatch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pytest

from service_common.validation.validators import BindingResult
from service_common.validation.validators import BindingResultError
from service_common.validation.validators import GlobalValidator
from service_common.validation.validators import Validator


class _ReservedNameValidator(Validator):
    dependencies = ("reserved_names",)

    def validate(self, target: Any, errors: BindingResult) -> None:
        if target.name in self.reserved_names:
            errors.reject_value("name", "is reserved", code="RESERVED")


class _PositiveQuantityValidator(Validator):
    def validate(self, target: Any, errors: BindingResult) -> None:
        if target.quantity <= 0:
            errors.reject_value("quantity", "must be positive")


@dataclass
class _Account:
    name: str

    def validator(self) -> Validator:
        return _ReservedNameValidator()


@dataclass
class _Order:
    quantity: int


@dataclass
class _BulkOrder(_Order):
    pass


@dataclass
class _NoValidator:
    name: str

    def validator(self) -> None:
        return None


def test_value_exposing_validator_is_validated_with_dependencies() -> None:
    validator = GlobalValidator(dependencies={"reserved_names": {"admin"}})
    errors = BindingResult("account")

    validator.validate(_Account(name="admin"), errors)

    assert errors.error_count == 1
    assert errors.field_errors[0].field == "name"
    assert errors.field_errors[0].code == "RESERVED"


def test_value_without_capability_is_a_no_op() -> None:
    errors = BindingResult("plain")

    GlobalValidator().validate(object(), errors)
    GlobalValidator().validate(_NoValidator(name="x"), errors)

    assert not errors.has_errors()


def test_registry_is_consulted_along_the_type_hierarchy() -> None:
    validator = GlobalValidator(registry={_Order: _PositiveQuantityValidator})
    errors = BindingResult("bulkOrder")

    validator.validate(_BulkOrder(quantity=0), errors)

    assert [item.message for item in errors.field_errors] == ["must be positive"]


def test_registered_validators_can_be_added_later() -> None:
    validator = GlobalValidator()
    validator.register(_Order, _PositiveQuantityValidator)

    assert isinstance(validator.resolve(_Order(quantity=1)), _PositiveQuantityValidator)


def test_missing_dependency_raises_lookup_error() -> None:
    with pytest.raises(LookupError):
        GlobalValidator().validate(_Account(name="admin"), BindingResult("account"))


def test_check_raises_with_binding_result() -> None:
    validator = GlobalValidator(dependencies={"reserved_names": {"root"}})

    with pytest.raises(BindingResultError) as excinfo:
        validator.check(_Account(name="root"))

    assert excinfo.value.binding_result.object_name == "_Account"
    assert str(excinfo.value) == "Validation failed for '_Account'. Error count: 1"


def test_check_returns_empty_result_for_valid_value() -> None:
    validator = GlobalValidator(dependencies={"reserved_names": {"root"}})

    result = validator.check(_Account(name="alice"), object_name="account")

    assert result.object_name == "account"
    assert result.error_count == 0


def test_delegated_validator_errors_propagate() -> None:
    class _Exploding(Validator):
        def validate(self, target: Any, errors: BindingResult) -> None:
            raise RuntimeError("validator bug")

    validator = GlobalValidator(registry={_Order: _Exploding})

    with pytest.raises(RuntimeError, match="validator bug"):
        validator.validate(_Order(quantity=1), BindingResult("order"))
