"""Span implementation - an operation name bound to a trace context."""

from __future__ import annotations

from typing import Dict, Optional, TYPE_CHECKING

from tracelink.context.context import TraceContext

if TYPE_CHECKING:
    from tracelink.ids import IdGenerator


class Span:
    """
    Identity-only span.

    Carries the operation name and the ``TraceContext`` used for propagation.
    Timing, recording and export belong to a backend and are not modelled.
    """

    def __init__(
        self,
        operation_name: str,
        context: TraceContext,
        id_generator: Optional["IdGenerator"] = None,
    ) -> None:
        """
        Initialize span.

        Args:
            operation_name: Name of the unit of work (may be empty until set)
            context: Trace context owned by this span
            id_generator: Id source used when deriving children
        """
        self.operation_name = operation_name
        self.context = context
        self._id_generator = id_generator

    def set_operation_name(self, operation_name: str) -> "Span":
        self.operation_name = operation_name
        return self

    def start_child(self, operation_name: str) -> "Span":
        """Start a span whose context is derived from this one."""
        return Span(
            operation_name,
            self.context.new_child(id_generator=self._id_generator),
            id_generator=self._id_generator,
        )

    def set_trace_attribute(self, key: str, value: str) -> "Span":
        """Set a trace attribute that propagates to descendants."""
        self.context.set_attribute(key, value)
        return self

    def trace_attribute(self, key: str) -> Optional[str]:
        return self.context.get_attribute(key)

    @property
    def trace_attributes(self) -> Dict[str, str]:
        return self.context.all_attributes()

    def __repr__(self) -> str:
        return f"Span(operation_name={self.operation_name!r}, context={self.context!r})"
