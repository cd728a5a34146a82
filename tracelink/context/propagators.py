"""HTTP header propagation of span identity and trace attributes."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, TYPE_CHECKING
from urllib.parse import quote_plus, unquote_plus

from tracelink import runtime_config
from tracelink.errors import DecodeError

if TYPE_CHECKING:
    from tracelink.tracer.propagator import SpanPropagator
    from tracelink.tracer.span import Span

logger = logging.getLogger(__name__)

# Precedes the identity headers (trace id, span id, ...).
CONTEXT_ID_HTTP_HEADER_PREFIX = "Open-Tracing-Context-Id-"

# Precedes the trace attribute headers.
TAGS_HTTP_HEADER_PREFIX = "Open-Tracing-Trace-Tags-"

_CONTEXT_ID_PREFIX_LOWER = CONTEXT_ID_HTTP_HEADER_PREFIX.lower()
_TAGS_PREFIX_LOWER = TAGS_HTTP_HEADER_PREFIX.lower()

_INVALID_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class HeaderSet:
    """
    Ordered, multi-valued collection of HTTP header lines.

    ``add`` appends a line and never replaces an existing one. Lookups are
    case-insensitive on the header name; names are stored as given.
    """

    def __init__(self, lines: Optional[Iterable[Tuple[str, str]]] = None) -> None:
        self._lines: List[Tuple[str, str]] = []
        for name, value in lines or ():
            self.add(name, value)

    @classmethod
    def from_any(cls, headers: Any) -> "HeaderSet":
        """
        Build a HeaderSet from the header shapes found in the wild.

        Accepts a HeaderSet (returned as is), an object exposing
        ``multi_items()`` (e.g. Starlette headers), a mapping of name to a
        string or to a sequence of strings, or an iterable of
        ``(name, value)`` pairs.
        """
        if isinstance(headers, HeaderSet):
            return headers
        if headers is None:
            return cls()
        multi_items = getattr(headers, "multi_items", None)
        if callable(multi_items):
            return cls(multi_items())
        if isinstance(headers, Mapping):
            result = cls()
            for name, value in headers.items():
                if isinstance(value, (str, bytes)):
                    result.add(name, value)
                else:
                    for item in value:
                        result.add(name, item)
            return result
        return cls(headers)

    def add(self, name: str, value: str) -> None:
        if isinstance(name, bytes):
            name = name.decode("latin-1")
        if isinstance(value, bytes):
            value = value.decode("latin-1")
        self._lines.append((name, value))

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the first value for ``name``."""
        wanted = name.lower()
        for line_name, value in self._lines:
            if line_name.lower() == wanted:
                return value
        return default

    def get_all(self, name: str) -> List[str]:
        wanted = name.lower()
        return [value for line_name, value in self._lines if line_name.lower() == wanted]

    def items(self) -> Iterator[Tuple[str, str]]:
        """Yield one ``(name, value)`` pair per header line, in order."""
        return iter(list(self._lines))

    def to_dict(self) -> Dict[str, List[str]]:
        """Group values by header name, keeping the first-seen spelling."""
        grouped: Dict[str, List[str]] = {}
        spelling: Dict[str, str] = {}
        for name, value in self._lines:
            key = spelling.setdefault(name.lower(), name)
            grouped.setdefault(key, []).append(value)
        return grouped

    def __iter__(self) -> Iterator[str]:
        return iter(self.to_dict())

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return self.get(name) is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderSet):
            return NotImplemented
        return self._lines == other._lines

    def __repr__(self) -> str:
        return f"HeaderSet({self._lines!r})"


def encode_header_value(value: str) -> str:
    """URL query-escape a header value (space becomes ``+``)."""
    return quote_plus(value, safe="")


def decode_header_value(value: str, header: Optional[str] = None) -> str:
    """
    Reverse ``encode_header_value``.

    Raises:
        DecodeError: if a ``%`` is not followed by two hex digits or the
            escaped bytes are not UTF-8
    """
    if _INVALID_ESCAPE.search(value):
        logger.debug("Invalid URL escape in header %s", header)
        raise DecodeError("invalid URL escape in header value", header=header, value=value)
    try:
        return unquote_plus(value, encoding="utf-8", errors="strict")
    except UnicodeDecodeError as e:
        logger.debug("Non UTF-8 escaped bytes in header %s", header)
        raise DecodeError("escaped header value is not valid UTF-8", header=header, value=value) from e


def propagate_to_headers(
    span: "Span",
    propagator: "SpanPropagator",
    headers: Optional[HeaderSet] = None,
) -> HeaderSet:
    """
    Encode ``span`` as HTTP headers. Values are URL-escaped.

    Args:
        span: Span whose context is propagated
        propagator: Capability that flattens the span into text maps
        headers: Existing header set to append to; a new one when omitted

    Returns:
        The header set the lines were appended to
    """
    if headers is None:
        headers = HeaderSet()
    context_ids, attributes = propagator.propagate_span_as_text(span)
    for suffix, value in context_ids.items():
        headers.add(CONTEXT_ID_HTTP_HEADER_PREFIX + suffix, encode_header_value(value))
    for suffix, value in attributes.items():
        headers.add(TAGS_HTTP_HEADER_PREFIX + suffix, encode_header_value(value))

    if runtime_config.get_debug():
        logger.debug(
            "Propagated context ids %s and attributes %s",
            sorted(context_ids),
            sorted(attributes),
        )
    else:
        logger.debug(
            "Propagated %d context id header(s) and %d attribute header(s)",
            len(context_ids),
            len(attributes),
        )
    return headers


def join_from_headers(operation_name: str, headers: Any, propagator: "SpanPropagator") -> "Span":
    """
    Decode a span from HTTP headers whose values are URL-escaped.

    Header-name prefixes match case-insensitively. When a header name occurs
    more than once only its first value is used. If ``operation_name`` is
    empty the caller must later call ``Span.set_operation_name``.

    Raises:
        DecodeError: if a used header value is not validly escaped
        Exception: whatever ``propagator.join_trace_from_text`` raises
    """
    context_ids: Dict[str, str] = {}
    attributes: Dict[str, str] = {}
    seen = set()
    for name, value in HeaderSet.from_any(headers).items():
        lowered = name.lower()
        if lowered.startswith(_CONTEXT_ID_PREFIX_LOWER):
            target = context_ids
            suffix = name[len(CONTEXT_ID_HTTP_HEADER_PREFIX):]
        elif lowered.startswith(_TAGS_PREFIX_LOWER):
            target = attributes
            suffix = name[len(TAGS_HTTP_HEADER_PREFIX):]
        else:
            continue
        if lowered in seen:
            continue
        seen.add(lowered)
        target[suffix] = decode_header_value(value, header=name)

    logger.debug(
        "Joining trace from %d context id header(s) and %d attribute header(s)",
        len(context_ids),
        len(attributes),
    )
    return propagator.join_trace_from_text(operation_name, context_ids, attributes)


def has_context_headers(headers: Any) -> bool:
    """Return True when any identity header is present."""
    return any(
        name.lower().startswith(_CONTEXT_ID_PREFIX_LOWER)
        for name, _ in HeaderSet.from_any(headers).items()
    )
