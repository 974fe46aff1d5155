"""Health endpoint exposing the cached health check results."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fastapi import APIRouter
from fastapi import status
from fastapi.responses import JSONResponse

from service_common.health.check import HealthCheck
from service_common.health.check import HealthStatus

_STATUS_ORDER = [HealthStatus.DOWN, HealthStatus.OUT_OF_SERVICE, HealthStatus.UP, HealthStatus.UNKNOWN]


def aggregate_status(statuses: list[HealthStatus]) -> HealthStatus:
    """Return the most severe status, or UNKNOWN if there is nothing to aggregate."""
    if not statuses:
        return HealthStatus.UNKNOWN
    return min(statuses, key=_STATUS_ORDER.index)


def health_router(checks: Mapping[str, HealthCheck]) -> APIRouter:
    """Build a router serving ``GET /health`` from ``checks``."""
    router = APIRouter(tags=["health"])

    @router.get("/health")
    def health() -> JSONResponse:
        components: dict[str, dict[str, Any]] = {}
        for name, check in checks.items():
            current = check.health()
            components[name] = {"status": current.status.value, "details": dict(current.details)}

        overall = aggregate_status([HealthStatus(component["status"]) for component in components.values()])
        status_code = status.HTTP_200_OK if overall is HealthStatus.UP else status.HTTP_503_SERVICE_UNAVAILABLE
        return JSONResponse(status_code=status_code, content={"status": overall.value, "components": components})

    return router
