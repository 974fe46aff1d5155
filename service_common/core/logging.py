"""Logging setup tagging every record with the deployment identity."""

from __future__ import annotations

import logging

from service_common.metadata.deployment import DeploymentContext

LOG_FORMAT = "[%(asctime)s - %(levelname)s - resource=%(resource)s - %(name)s - %(message)s]"


class ResourceFilter(logging.Filter):
    """Attach the canonical resource identifier to each record."""

    def __init__(self, deployment: DeploymentContext) -> None:
        super().__init__()
        self._resource = deployment.to_canonical_string()

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.resource = self._resource
        return True


def setup_logging(deployment: DeploymentContext, level: int | str = logging.INFO) -> None:
    """Initialize root logging once for the service."""

    root = logging.getLogger()
    root.setLevel(level)

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)

    for handler in root.handlers:
        if not any(isinstance(existing, ResourceFilter) for existing in handler.filters):
            handler.addFilter(ResourceFilter(deployment))
