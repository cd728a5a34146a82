"""Utility functions for tracelink."""

from tracelink.utils.helpers import (
    format_id,
    parse_id,
    to_otel_span_context,
    from_otel_span_context,
)

__all__ = [
    "format_id",
    "parse_id",
    "to_otel_span_context",
    "from_otel_span_context",
]
