"""Service configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_HEALTH_CHECK_DELAY_SECONDS = 0.0
DEFAULT_HEALTH_CHECK_PERIOD_SECONDS = 10.0
DEFAULT_LOG_LEVEL = "INFO"


def _get_optional_env(name: str) -> str | None:
    raw = os.getenv(name)
    if not raw:
        return None
    return raw


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    return float(raw)


@dataclass(frozen=True)
class ServiceSettings:
    """Runtime settings shared by the error, health, and identity layers."""

    service_name: str | None
    service_version: str | None
    deployment_datacenter: str | None
    health_check_delay_seconds: float
    health_check_period_seconds: float
    log_level: str

    def safe_for_logging(self) -> dict[str, str | float | None]:
        """Return service settings safe for logs."""
        return {
            "service_name": self.service_name,
            "service_version": self.service_version,
            "deployment_datacenter": self.deployment_datacenter,
            "health_check_delay_seconds": self.health_check_delay_seconds,
            "health_check_period_seconds": self.health_check_period_seconds,
            "log_level": self.log_level,
        }


@lru_cache(maxsize=1)
def get_service_settings() -> ServiceSettings:
    """Load service settings from the environment."""
    return ServiceSettings(
        service_name=_get_optional_env("SERVICE_NAME"),
        service_version=_get_optional_env("SERVICE_VERSION"),
        deployment_datacenter=_get_optional_env("DEPLOYMENT_DATACENTER"),
        health_check_delay_seconds=_get_float_env("HEALTH_CHECK_DELAY_SECONDS", DEFAULT_HEALTH_CHECK_DELAY_SECONDS),
        health_check_period_seconds=_get_float_env("HEALTH_CHECK_PERIOD_SECONDS", DEFAULT_HEALTH_CHECK_PERIOD_SECONDS),
        log_level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )
