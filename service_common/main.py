"""Example FastAPI application wired with the shared service conventions."""

from collections.abc import AsyncIterator
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from service_common.api.things import router as things_router
from service_common.core.config import get_service_settings
from service_common.core.errors import register_error_handlers
from service_common.core.logging import setup_logging
from service_common.health.router import health_router
from service_common.health.store import ThingStoreHealthCheck
from service_common.metadata.deployment import get_deployment_context
from service_common.services.things import ThingStore
from service_common.validation.validators import GlobalValidator
from service_common.validation.validators import register_global_validator

logger = logging.getLogger(__name__)

settings = get_service_settings()
deployment = get_deployment_context()
setup_logging(deployment, settings.log_level)
logger.info("Starting service with settings=%s", settings.safe_for_logging())

thing_store = ThingStore()
thing_store_health = ThingStoreHealthCheck(thing_store, start=False)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Own the summary worker pool and the health check schedule."""
    executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="thing-summary")
    app.state.summary_executor = executor
    thing_store_health.start()
    try:
        yield
    finally:
        thing_store_health.stop(timeout=1.0)
        executor.shutdown(wait=True)


app = FastAPI(title="service-common", lifespan=lifespan)
app.state.thing_store = thing_store
register_error_handlers(app, deployment)
register_global_validator(app, GlobalValidator(dependencies={"thing_store": thing_store}))
app.include_router(things_router)
app.include_router(health_router({"things": thing_store_health}))
