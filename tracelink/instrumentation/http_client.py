"""HTTP client helpers for context propagation."""

from __future__ import annotations

from typing import MutableMapping, TypeVar, Union, TYPE_CHECKING

from tracelink.context.propagators import HeaderSet, propagate_to_headers

if TYPE_CHECKING:
    from tracelink.tracer.propagator import SpanPropagator
    from tracelink.tracer.span import Span

H = TypeVar("H", bound=Union[HeaderSet, MutableMapping[str, str]])


def inject_headers(headers: H, span: "Span", propagator: "SpanPropagator") -> H:
    """
    Add the span's propagation headers to an outgoing request's headers.

    A HeaderSet is appended to. A plain mapping (``dict``, ``requests``
    headers) gets one entry per header name, replacing any stale value.

    Returns the same headers object for convenience.
    """
    if isinstance(headers, HeaderSet):
        propagate_to_headers(span, propagator, headers)
        return headers
    for name, value in propagate_to_headers(span, propagator).items():
        headers[name] = value
    return headers
