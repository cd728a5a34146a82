"""Capability contracts a tracing backend implements."""

from __future__ import annotations

import abc
from typing import Dict, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from tracelink.tracer.span import Span


class SpanPropagator(abc.ABC):
    """
    Maps a span to and from flat string maps.

    The identity map carries the ids and sampling flag under suffix names the
    implementation chooses; the attribute map carries one entry per trace
    attribute. Transport encodings (HTTP headers) are layered on top.
    """

    @abc.abstractmethod
    def propagate_span_as_text(self, span: "Span") -> Tuple[Dict[str, str], Dict[str, str]]:
        """Return ``(context_ids, attributes)`` for ``span``."""

    @abc.abstractmethod
    def join_trace_from_text(
        self,
        operation_name: str,
        context_ids: Dict[str, str],
        attributes: Dict[str, str],
    ) -> "Span":
        """
        Rebuild a span from the maps produced by ``propagate_span_as_text``.

        Raises whatever error the implementation uses for maps that cannot
        describe a span (missing or malformed ids). If ``operation_name`` is
        empty the caller must call ``Span.set_operation_name`` before use.
        """


class Tracer(SpanPropagator):
    """Creates root spans and propagates them."""

    @abc.abstractmethod
    def start_trace(self, operation_name: str) -> "Span":
        """
        Start a span with no parent, i.e. the root of a new trace.

        Example::

            span = tracer.start_trace("GetFeed")
            span.set_trace_attribute("user_agent", request.user_agent)
        """
