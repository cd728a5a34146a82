"""Tracer components for the tracing SDK."""

from tracelink.tracer.propagator import SpanPropagator, Tracer
from tracelink.tracer.span import Span
from tracelink.tracer.tracer import StandardPropagator, StandardTracer

__all__ = [
    "Span",
    "SpanPropagator",
    "Tracer",
    "StandardPropagator",
    "StandardTracer",
]
