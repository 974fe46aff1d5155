"""Route dependencies enforcing request and response media types."""

from __future__ import annotations

from collections.abc import Callable

from fastapi import Request

from service_common.core.exceptions import MediaTypeNotAcceptableError
from service_common.core.exceptions import MediaTypeNotSupportedError


def _essence(media_type: str) -> str:
    return media_type.split(";", 1)[0].strip().lower()


def _accepts(accept_header: str, produced: str) -> bool:
    produced_type, _, _ = produced.partition("/")
    for candidate in accept_header.split(","):
        candidate = _essence(candidate)
        if candidate in ("*/*", produced):
            return True
        if candidate == f"{produced_type}/*":
            return True
    return False


def require_content_type(*media_types: str) -> Callable[[Request], None]:
    """Reject requests whose body is not one of ``media_types``."""
    supported = [_essence(media_type) for media_type in media_types]

    def dependency(request: Request) -> None:
        content_type = request.headers.get("content-type")
        if content_type is None or _essence(content_type) not in supported:
            raise MediaTypeNotSupportedError(
                f"Content type '{content_type or ''}' not supported. Supported: {', '.join(supported)}"
            )

    return dependency


def require_accept(*media_types: str) -> Callable[[Request], None]:
    """Reject requests that cannot accept any of ``media_types``."""
    produced = [_essence(media_type) for media_type in media_types]

    def dependency(request: Request) -> None:
        accept = request.headers.get("accept")
        if not accept:
            return
        if not any(_accepts(accept, media_type) for media_type in produced):
            raise MediaTypeNotAcceptableError("Could not find acceptable representation")

    return dependency
