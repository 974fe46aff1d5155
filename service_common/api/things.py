"""Example thing routes wired to the shared error, validation and media-type hooks."""

from __future__ import annotations

import asyncio
from concurrent.futures import Executor

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Request
from fastapi.responses import JSONResponse

from service_common.core.context import RequestContext
from service_common.core.media_types import require_accept
from service_common.core.media_types import require_content_type
from service_common.core.observable import handle_error
from service_common.schemas.thing import Thing
from service_common.schemas.thing import ThingCreate
from service_common.schemas.thing import ThingSummary
from service_common.services.things import ThingStore
from service_common.services.things import summarize_thing
from service_common.validation.validators import GlobalValidator
from service_common.validation.validators import get_global_validator

router = APIRouter(prefix="/v1", tags=["things"])


def get_thing_store(request: Request) -> ThingStore:
    return request.app.state.thing_store


def get_summary_executor(request: Request) -> Executor:
    """Executor created and shut down by the application lifespan."""
    return request.app.state.summary_executor


@router.post(
    "/things",
    response_model=Thing,
    status_code=201,
    dependencies=[Depends(require_content_type("application/json"))],
)
def create_thing_endpoint(
    payload: ThingCreate,
    store: ThingStore = Depends(get_thing_store),
    validator: GlobalValidator = Depends(get_global_validator),
) -> Thing:
    """Create a thing after running its validator."""
    validator.check(payload, object_name="thingCreate")
    return store.create(payload)


@router.get(
    "/things/{thing_id}",
    response_model=Thing,
    dependencies=[Depends(require_accept("application/json"))],
)
def get_thing_endpoint(thing_id: int, store: ThingStore = Depends(get_thing_store)) -> Thing:
    """Fetch a thing by id."""
    return store.get(thing_id)


@router.get("/things/{thing_id}/summary", response_model=ThingSummary)
async def get_thing_summary_endpoint(
    thing_id: int,
    request: Request,
    store: ThingStore = Depends(get_thing_store),
    executor: Executor = Depends(get_summary_executor),
) -> ThingSummary | JSONResponse:
    """Summarize a thing on a worker thread."""
    context = RequestContext.from_request(request)
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(executor, summarize_thing, store, thing_id)
    except Exception as exc:
        return handle_error(exc, context, request.app.state.deployment_context)
