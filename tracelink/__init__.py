"""tracelink: span identity, trace attribute inheritance and HTTP propagation."""

import logging

from tracelink.context import (
    CONTEXT_ID_HTTP_HEADER_PREFIX,
    TAGS_HTTP_HEADER_PREFIX,
    HeaderSet,
    TraceContext,
    join_from_headers,
    new_child,
    new_root,
    propagate_to_headers,
)
from tracelink.errors import ConfigError, DecodeError, PropagationError, TracelinkError
from tracelink.ids import IdGenerator, RandomIdGenerator
from tracelink.processors import Sampler, SamplingResult
from tracelink.tracer import Span, SpanPropagator, StandardPropagator, StandardTracer, Tracer

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "TraceContext",
    "new_root",
    "new_child",
    "HeaderSet",
    "propagate_to_headers",
    "join_from_headers",
    "CONTEXT_ID_HTTP_HEADER_PREFIX",
    "TAGS_HTTP_HEADER_PREFIX",
    "IdGenerator",
    "RandomIdGenerator",
    "Sampler",
    "SamplingResult",
    "Span",
    "SpanPropagator",
    "Tracer",
    "StandardPropagator",
    "StandardTracer",
    "TracelinkError",
    "DecodeError",
    "PropagationError",
    "ConfigError",
]
