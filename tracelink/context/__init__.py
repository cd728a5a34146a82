"""Trace context model and header propagation."""

from tracelink.context.attributes import AttributeStore, ReadWriteLock
from tracelink.context.context import TraceContext, new_child, new_root
from tracelink.context.propagators import (
    CONTEXT_ID_HTTP_HEADER_PREFIX,
    TAGS_HTTP_HEADER_PREFIX,
    HeaderSet,
    decode_header_value,
    encode_header_value,
    has_context_headers,
    join_from_headers,
    propagate_to_headers,
)

__all__ = [
    "AttributeStore",
    "ReadWriteLock",
    "TraceContext",
    "new_root",
    "new_child",
    "CONTEXT_ID_HTTP_HEADER_PREFIX",
    "TAGS_HTTP_HEADER_PREFIX",
    "HeaderSet",
    "encode_header_value",
    "decode_header_value",
    "has_context_headers",
    "propagate_to_headers",
    "join_from_headers",
]
