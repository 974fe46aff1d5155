"""Health check for the in-memory thing store."""

from __future__ import annotations

from service_common.health.check import Health
from service_common.health.check import HealthCheck
from service_common.services.things import ThingStore


class ThingStoreHealthCheck(HealthCheck):
    def __init__(self, store: ThingStore, **kwargs: float | bool | None) -> None:
        self._store = store
        super().__init__(**kwargs)

    def do_health_check(self) -> Health:
        if not self._store.available:
            return Health.down(reason="store unavailable")
        return Health.up(things=self._store.count())
