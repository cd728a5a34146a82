"""Standard tracer: identity-only Tracer and SpanPropagator implementation."""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple, TYPE_CHECKING

from tracelink.context.context import TraceContext
from tracelink.errors import PropagationError
from tracelink.tracer.propagator import SpanPropagator, Tracer
from tracelink.tracer.span import Span
from tracelink.utils.helpers import format_id, parse_id

if TYPE_CHECKING:
    from tracelink.ids import IdGenerator
    from tracelink.processors.sampler import Sampler

logger = logging.getLogger(__name__)

FIELD_NAME_TRACE_ID = "traceid"
FIELD_NAME_SPAN_ID = "spanid"
FIELD_NAME_PARENT_SPAN_ID = "parentspanid"
FIELD_NAME_SAMPLED = "sampled"

_TRUE_VALUES = {"true", "1"}
_FALSE_VALUES = {"false", "0"}


class StandardPropagator(SpanPropagator):
    """
    Propagates a span's ``TraceContext`` as text maps.

    Ids are written as lower-case hex and the sampling flag as
    ``true``/``false``. Suffix names are matched case-insensitively on join
    because HTTP stacks are free to change header case.
    """

    def __init__(self, id_generator: Optional["IdGenerator"] = None) -> None:
        self._id_generator = id_generator

    def propagate_span_as_text(self, span: Span) -> Tuple[Dict[str, str], Dict[str, str]]:
        context = span.context
        context_ids = {
            FIELD_NAME_TRACE_ID: format_id(context.trace_id),
            FIELD_NAME_SPAN_ID: format_id(context.span_id),
            FIELD_NAME_PARENT_SPAN_ID: format_id(context.parent_span_id),
            FIELD_NAME_SAMPLED: "true" if context.sampled else "false",
        }
        return context_ids, context.all_attributes()

    def join_trace_from_text(
        self,
        operation_name: str,
        context_ids: Dict[str, str],
        attributes: Dict[str, str],
    ) -> Span:
        """
        Rebuild the remote span.

        The joined span carries the remote span's own ids; callers derive
        local work with ``Span.start_child``.

        Raises:
            PropagationError: if the trace or span id is missing or malformed
        """
        fields = {key.lower(): value for key, value in context_ids.items()}

        trace_id = self._parse_required_id(fields, FIELD_NAME_TRACE_ID)
        span_id = self._parse_required_id(fields, FIELD_NAME_SPAN_ID)
        parent_span_id = self._parse_id(FIELD_NAME_PARENT_SPAN_ID, fields.get(FIELD_NAME_PARENT_SPAN_ID, ""))
        sampled = self._parse_sampled(fields.get(FIELD_NAME_SAMPLED, "false"))

        context = TraceContext(
            trace_id=trace_id,
            span_id=span_id,
            parent_span_id=parent_span_id,
            sampled=sampled,
            attributes=attributes,
        )
        logger.debug(
            "Joined trace %s at span %s with %d attribute(s)",
            format_id(trace_id),
            format_id(span_id),
            len(attributes),
        )
        return Span(operation_name, context, id_generator=self._id_generator)

    def _parse_required_id(self, fields: Dict[str, str], name: str) -> int:
        raw = fields.get(name)
        if not raw:
            raise PropagationError("missing required context id field", {"field": name})
        value = self._parse_id(name, raw)
        if value == 0:
            raise PropagationError("context id field must be non-zero", {"field": name})
        return value

    @staticmethod
    def _parse_id(name: str, raw: str) -> int:
        try:
            return parse_id(raw)
        except ValueError as e:
            raise PropagationError("malformed context id field", {"field": name, "value": raw}) from e

    @staticmethod
    def _parse_sampled(raw: str) -> bool:
        value = raw.strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise PropagationError("malformed sampled field", {"field": FIELD_NAME_SAMPLED, "value": raw})


class StandardTracer(StandardPropagator, Tracer):
    """
    Tracer that starts root spans on the context model.

    Args:
        id_generator: Id source for every span it creates; defaults to the
            process generator from ``runtime_config``
        sampler: Sampling policy for new traces; defaults to the runtime rate
    """

    def __init__(
        self,
        id_generator: Optional["IdGenerator"] = None,
        sampler: Optional["Sampler"] = None,
    ) -> None:
        super().__init__(id_generator=id_generator)
        self._sampler = sampler

    def start_trace(self, operation_name: str) -> Span:
        context = TraceContext.new_root(
            id_generator=self._id_generator,
            sampler=self._sampler,
        )
        return Span(operation_name, context, id_generator=self._id_generator)
