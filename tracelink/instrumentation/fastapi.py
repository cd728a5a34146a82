"""
FastAPI middleware helpers for joining traces on incoming HTTP requests.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, TYPE_CHECKING

from tracelink.errors import TracelinkError
from tracelink.instrumentation.http_server import start_server_span

if TYPE_CHECKING:
    from tracelink.tracer.propagator import Tracer

logger = logging.getLogger(__name__)

REQUEST_STATE_ATTR = "tracelink_span"


def install_http_middleware(app: Any, tracer: "Tracer", *, operation_name: str = "http.request") -> None:
    """
    Attach an HTTP middleware that gives each FastAPI request a server span.

    - Joins the caller's trace from the request headers (or starts a new one)
    - Starts a new trace when the incoming trace headers are malformed
    - Stores the span on ``request.state.tracelink_span``
    """

    @app.middleware("http")
    async def tracing_middleware(request, call_next: Callable[[Any], Awaitable[Any]]):  # type: ignore
        try:
            span = start_server_span(tracer, operation_name, request.headers)
        except TracelinkError as e:
            logger.debug("Ignoring unusable trace headers, starting a new trace: %s", e)
            span = tracer.start_trace(operation_name)
        setattr(request.state, REQUEST_STATE_ATTR, span)
        return await call_next(request)

    return None
