"""Per-request context passed explicitly through error resolution."""

from __future__ import annotations

from dataclasses import dataclass

from starlette.requests import Request

TRACE_ID_HEADER = "X-B3-TraceId"
TRACEPARENT_HEADER = "traceparent"


@dataclass(frozen=True)
class RequestContext:
    """The request facts error resolution needs: path and active trace id."""

    path: str
    trace_id: str | None = None

    @classmethod
    def from_request(cls, request: Request) -> RequestContext:
        return cls(path=request.url.path, trace_id=_trace_id(request))


def _trace_id(request: Request) -> str | None:
    trace_id = request.headers.get(TRACE_ID_HEADER)
    if trace_id:
        return trace_id

    # W3C format: version-traceid-parentid-flags
    traceparent = request.headers.get(TRACEPARENT_HEADER)
    if traceparent:
        parts = traceparent.split("-")
        if len(parts) >= 2 and parts[1]:
            return parts[1]

    return None
