"""Helper functions for id formatting and OpenTelemetry compatibility."""

from __future__ import annotations

import re

from opentelemetry.trace import SpanContext as OTelSpanContext
from opentelemetry.trace import TraceFlags

from tracelink.context.context import TraceContext

_ID_MASK = (1 << 64) - 1
_HEX_ID = re.compile(r"[0-9a-fA-F]{1,16}")


def format_id(value: int) -> str:
    """
    Format a 64-bit id as a hex string.

    Args:
        value: Trace or span id

    Returns:
        16-character lower-case hex string
    """
    return format(value, '016x')


def parse_id(hex_string: str) -> int:
    """
    Parse a hex id back to an integer.

    Args:
        hex_string: Hex string of at most 16 digits

    Returns:
        The id, or 0 for an empty string

    Raises:
        ValueError: if the string is not 1 to 16 plain hex digits
    """
    if not hex_string:
        return 0
    if not _HEX_ID.fullmatch(hex_string):
        raise ValueError(f"not a 64-bit hex id: {hex_string!r}")
    return int(hex_string, 16)


def to_otel_span_context(context: TraceContext, is_remote: bool = False) -> OTelSpanContext:
    """Convert a TraceContext to an OpenTelemetry SpanContext."""
    return OTelSpanContext(
        trace_id=context.trace_id,
        span_id=context.span_id,
        is_remote=is_remote,
        trace_flags=TraceFlags(TraceFlags.SAMPLED if context.sampled else TraceFlags.DEFAULT),
    )


def from_otel_span_context(otel_context: OTelSpanContext) -> TraceContext:
    """
    Convert an OpenTelemetry SpanContext to a TraceContext.

    OTel trace ids are 128-bit; only the low 64 bits are kept. The result has
    no parent and no attributes.

    Raises:
        ValueError: if the OTel context is not valid or its low 64 trace id
            bits are all zero
    """
    if not otel_context.is_valid:
        raise ValueError("cannot convert an invalid OpenTelemetry SpanContext")
    trace_id = otel_context.trace_id & _ID_MASK
    if trace_id == 0:
        raise ValueError("low 64 bits of the OpenTelemetry trace id are zero")
    return TraceContext(
        trace_id=trace_id,
        span_id=otel_context.span_id,
        sampled=otel_context.trace_flags.sampled,
    )
