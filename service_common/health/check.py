"""Scheduled health check base class."""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
import logging
import threading
from typing import Any

from service_common.core.config import get_service_settings

logger = logging.getLogger(__name__)


class HealthStatus(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    OUT_OF_SERVICE = "OUT_OF_SERVICE"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class Health:
    """Immutable health snapshot."""

    status: HealthStatus
    details: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def up(cls, **details: Any) -> Health:
        return cls(HealthStatus.UP, details)

    @classmethod
    def down(cls, **details: Any) -> Health:
        return cls(HealthStatus.DOWN, details)

    @classmethod
    def out_of_service(cls, **details: Any) -> Health:
        return cls(HealthStatus.OUT_OF_SERVICE, details)


class HealthCheck(ABC):
    """Runs ``do_health_check`` on a background schedule and caches the result.

    ``health()`` never runs a check itself: it returns the last cached snapshot,
    which is out-of-service until the first scheduled run completes. The cached
    value is replaced as a single reference by the scheduler thread, so readers
    always see either the previous or the new snapshot.

    The schedule starts inside ``__init__`` unless ``start=False``, so subclasses
    must assign everything ``do_health_check`` reads before calling
    ``super().__init__()``. Otherwise pass ``start=False`` and call ``start()``
    once construction is complete.
    """

    def __init__(
        self,
        *,
        delay: float | None = None,
        period: float | None = None,
        start: bool = True,
    ) -> None:
        settings = get_service_settings()
        self.delay = settings.health_check_delay_seconds if delay is None else delay
        self.period = settings.health_check_period_seconds if period is None else period
        if self.delay < 0:
            raise ValueError("delay must be >= 0")
        if self.period <= 0:
            raise ValueError("period must be positive")

        self._current = Health.out_of_service()
        self._stopped: threading.Event | None = None
        self._thread: threading.Thread | None = None
        if start:
            self.start()

    @abstractmethod
    def do_health_check(self) -> Health:
        """Determine whether the service is healthy."""

    def health(self) -> Health:
        return self._current

    def run_once(self) -> Health:
        """Run the check now and cache its result."""
        try:
            result = self.do_health_check()
        except Exception as exc:
            logger.exception("Health check %s raised", type(self).__name__)
            result = Health.down(error=type(exc).__name__)
        self._current = result
        return result

    def start(self) -> None:
        if self._thread is not None:
            return
        # One stop event per schedule; stopped schedules stay stopped.
        stopped = threading.Event()
        self._stopped = stopped
        self._thread = threading.Thread(
            target=self._run_schedule,
            args=(stopped,),
            name=f"HealthCheckTaskTimer-{type(self).__name__}",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        if self._stopped is not None:
            self._stopped.set()
        thread = self._thread
        self._thread = None
        self._stopped = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _run_schedule(self, stopped: threading.Event) -> None:
        if stopped.wait(self.delay):
            return
        while not stopped.is_set():
            self.run_once()
            if stopped.wait(self.period):
                return
