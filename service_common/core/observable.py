"""Error handling for work that fails off the request's own call path.

When a route hands work to a thread pool or another task, the failure surfaces
wrapped in whatever the concurrency primitive raises. ``handle_error`` unwraps
it to the root cause and renders the same error response the exception handlers
would, using the request context captured before the work was submitted.
"""

from __future__ import annotations

import logging

from fastapi.responses import JSONResponse

from service_common.core.context import RequestContext
from service_common.core.error_attributes import Unclassified
from service_common.core.error_attributes import classify_error
from service_common.core.error_attributes import resolve_error_attributes
from service_common.core.error_response import compose_error_response
from service_common.core.error_response import render_error_response
from service_common.metadata.deployment import DeploymentContext

logger = logging.getLogger(__name__)


def root_cause(error: BaseException) -> BaseException:
    """Follow the explicit cause, then the implicit context, to the innermost error."""
    seen = {id(error)}
    current = error
    while True:
        nested = current.__cause__ or current.__context__
        if nested is None or id(nested) in seen:
            return current
        seen.add(id(nested))
        current = nested


def handle_error(error: BaseException, context: RequestContext, deployment: DeploymentContext) -> JSONResponse:
    """Render the error response for the root cause of ``error``."""
    cause = root_cause(error)
    if isinstance(classify_error(cause), Unclassified):
        logger.error("Asynchronous work for %s failed", context.path, exc_info=error)

    attributes = resolve_error_attributes(cause, context)
    return render_error_response(compose_error_response(attributes, deployment))
