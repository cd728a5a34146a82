"""HTTP server helpers for extracting context and creating server spans."""

from __future__ import annotations

import logging
from typing import Any, Optional, TYPE_CHECKING

from tracelink.context.propagators import has_context_headers, join_from_headers

if TYPE_CHECKING:
    from tracelink.tracer.propagator import SpanPropagator, Tracer
    from tracelink.tracer.span import Span

logger = logging.getLogger(__name__)


def extract_span(operation_name: str, headers: Any, propagator: "SpanPropagator") -> Optional["Span"]:
    """
    Join the caller's trace from request headers.

    Returns None when the request carries no identity headers. Decode and
    propagator errors are raised to the caller.
    """
    if not has_context_headers(headers):
        return None
    return join_from_headers(operation_name, headers, propagator)


def start_server_span(tracer: "Tracer", operation_name: str, headers: Any) -> "Span":
    """
    Start the span that handles an incoming request.

    The span is a child of the caller's span when the headers carry one,
    otherwise the root of a new trace. Malformed headers raise; the caller
    decides whether to reject the request or start over with
    ``tracer.start_trace``.
    """
    remote = extract_span(operation_name, headers, tracer)
    if remote is None:
        logger.debug("No incoming trace context, starting trace %r", operation_name)
        return tracer.start_trace(operation_name)
    return remote.start_child(operation_name)
