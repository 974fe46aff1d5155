"""In-memory thing store backing the example routes."""

from __future__ import annotations

import threading

from service_common.core.exceptions import BadRequestError
from service_common.core.exceptions import ConflictError
from service_common.core.exceptions import NotFoundError
from service_common.schemas.thing import Thing
from service_common.schemas.thing import ThingCreate
from service_common.schemas.thing import ThingSummary


class ThingSummaryError(RuntimeError):
    """Raised when a summary job fails."""


class ThingStore:
    """Thread-safe thing storage keyed by sequential id."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._things: dict[int, Thing] = {}
        self._next_id = 1
        self.available = True

    def create(self, payload: ThingCreate) -> Thing:
        with self._lock:
            if any(existing.name == payload.name for existing in self._things.values()):
                error = ConflictError(f"Thing named '{payload.name}' already exists", error_code="THING_EXISTS")
                error.add_field_error("name", "is already in use", code="DUPLICATE")
                raise error
            thing = Thing(id=self._next_id, name=payload.name, tags=list(payload.tags))
            self._things[thing.id] = thing
            self._next_id += 1
            return thing

    def get(self, thing_id: int) -> Thing:
        with self._lock:
            thing = self._things.get(thing_id)
        if thing is None:
            raise NotFoundError(f"Thing {thing_id} not found", error_code="THING_NOT_FOUND")
        return thing

    def find_by_name(self, name: str) -> Thing | None:
        with self._lock:
            for thing in self._things.values():
                if thing.name == name:
                    return thing
        return None

    def count(self) -> int:
        with self._lock:
            return len(self._things)


def summarize_thing(store: ThingStore, thing_id: int) -> ThingSummary:
    """Build a thing summary; runs on a worker thread."""
    if thing_id < 1:
        raise BadRequestError(f"Thing id must be positive, got {thing_id}", error_code="INVALID_THING_ID")
    try:
        thing = store.get(thing_id)
    except NotFoundError as exc:
        raise ThingSummaryError(f"Summary job for thing {thing_id} failed") from exc
    return ThingSummary(id=thing.id, name=thing.name, tag_count=len(thing.tags))
