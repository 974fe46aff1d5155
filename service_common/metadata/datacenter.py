"""Datacenter kinds a service instance can be deployed into."""

from __future__ import annotations

from enum import Enum


class DataCenterType(str, Enum):
    """Recognized datacenter kinds, keyed by their configuration value."""

    PRIVATE = "Private"
    AMAZON = "Amazon"
    AMAZON_ECS = "AmazonECS"
    MYOWN = "MyOwn"

    @property
    def tag(self) -> str:
        """Short tag used in the canonical resource identifier."""
        return _TAGS[self]

    @classmethod
    def lookup(cls, value: str | None) -> DataCenterType | None:
        """Return the datacenter type for a configuration value, or None if unrecognized."""
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def supported_values(cls) -> list[str]:
        return [member.value for member in cls]


_TAGS = {
    DataCenterType.PRIVATE: "private",
    DataCenterType.AMAZON: "aws",
    DataCenterType.AMAZON_ECS: "awsecs",
    DataCenterType.MYOWN: "myown",
}
