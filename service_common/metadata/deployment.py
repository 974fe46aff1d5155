"""Deployment identity derived from explicit configuration and the environment."""

from __future__ import annotations

from collections.abc import Mapping
from functools import cached_property
from functools import lru_cache
import os

from service_common.core.config import ServiceSettings
from service_common.core.config import get_service_settings
from service_common.metadata.datacenter import DataCenterType

ENV_APP_NAME = "CLOUD_APP"
ENV_APP_VERSION = "CLOUD_APP_VERSION"
ENV_APP_DATACENTER = "CLOUD_DATACENTER"
ENV_APP_ENVIRONMENT = "CLOUD_ENVIRONMENT"
ENV_APP_REGION = "EC2_REGION"

DEFAULT_ENVIRONMENT = "local"
DEFAULT_REGION = "us-west-2"
DEFAULT_DATACENTER = DataCenterType.MYOWN.value


class DeploymentConfigurationError(ValueError):
    """Raised when the explicit deployment configuration cannot be honored."""


class DeploymentContext:
    """Describes where and as what the running service instance is deployed.

    Explicit ``name``, ``version`` and ``datacenter`` values take precedence over
    the environment. Each attribute is resolved on first access and cached, so an
    invalid explicit datacenter surfaces as a ``DeploymentConfigurationError``
    the first time ``datacenter_type`` is read.
    """

    def __init__(
        self,
        *,
        name: str | None = None,
        version: str | None = None,
        datacenter: str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._name = name
        self._version = version
        self._datacenter = datacenter
        self._environ = environ if environ is not None else os.environ

    @classmethod
    def from_settings(cls, settings: ServiceSettings) -> DeploymentContext:
        return cls(
            name=settings.service_name,
            version=settings.service_version,
            datacenter=settings.deployment_datacenter,
        )

    @cached_property
    def name(self) -> str | None:
        if self._name is not None:
            return self._name
        return self._environ.get(ENV_APP_NAME)

    @cached_property
    def version(self) -> str | None:
        if self._version is not None:
            return self._version
        return self._environ.get(ENV_APP_VERSION)

    @cached_property
    def datacenter_type(self) -> DataCenterType | None:
        if self._datacenter:
            datacenter_type = DataCenterType.lookup(self._datacenter)
            if datacenter_type is None:
                supported = ", ".join(DataCenterType.supported_values())
                raise DeploymentConfigurationError(
                    f"The datacenter type '{self._datacenter}' specified by the deployment datacenter "
                    f"setting is not supported. Supported types are: [{supported}]"
                )
            return datacenter_type

        return DataCenterType.lookup(self._environ.get(ENV_APP_DATACENTER, DEFAULT_DATACENTER))

    @cached_property
    def region(self) -> str:
        return self._environ.get(ENV_APP_REGION, DEFAULT_REGION)

    @cached_property
    def environment(self) -> str:
        return self._environ.get(ENV_APP_ENVIRONMENT, DEFAULT_ENVIRONMENT)

    def to_canonical_string(self) -> str:
        """Return the colon-delimited resource identifier for this deployment."""
        name = self.name or ""
        version = self.version or ""

        datacenter_type = self.datacenter_type
        if datacenter_type is None:
            # Running locally or in an unsupported datacenter
            return f"{name}:{version}"

        return ":".join([datacenter_type.tag, self.environment or "", self.region or "", name, version])

    def __str__(self) -> str:
        return self.to_canonical_string()

    def __repr__(self) -> str:
        return f"DeploymentContext({self.to_canonical_string()!r})"


@lru_cache(maxsize=1)
def get_deployment_context() -> DeploymentContext:
    """Return the process-wide deployment context built from service settings."""
    return DeploymentContext.from_settings(get_service_settings())
