"""Trace identity and inheritable attributes for a single span."""

from __future__ import annotations

from typing import Dict, Optional, TYPE_CHECKING

from tracelink import runtime_config
from tracelink.context.attributes import AttributeStore

if TYPE_CHECKING:
    from tracelink.ids import IdGenerator
    from tracelink.processors.sampler import Sampler


class TraceContext:
    """
    A point in a trace: ids, sampling decision and trace attributes.

    Identity fields are fixed at construction. Attributes live in an
    ``AttributeStore`` owned by this context alone, so any number of threads
    may read and write them concurrently.
    """

    __slots__ = ("_trace_id", "_span_id", "_parent_span_id", "_sampled", "_attributes")

    def __init__(
        self,
        trace_id: int,
        span_id: int,
        parent_span_id: int = 0,
        sampled: bool = False,
        attributes: Optional[Dict[str, str]] = None,
    ) -> None:
        self._trace_id = trace_id
        self._span_id = span_id
        self._parent_span_id = parent_span_id
        self._sampled = bool(sampled)
        self._attributes = AttributeStore(attributes)

    @property
    def trace_id(self) -> int:
        return self._trace_id

    @property
    def span_id(self) -> int:
        return self._span_id

    @property
    def parent_span_id(self) -> int:
        """Span id of the parent, or 0 for a root span."""
        return self._parent_span_id

    @property
    def sampled(self) -> bool:
        return self._sampled

    @classmethod
    def new_root(
        cls,
        id_generator: Optional["IdGenerator"] = None,
        sampler: Optional["Sampler"] = None,
    ) -> "TraceContext":
        """
        Create the context of a root span.

        Args:
            id_generator: Id source; defaults to the process generator
            sampler: Sampling policy; defaults to one trace in
                ``runtime_config.get_sample_one_in()``

        Returns:
            A context with fresh ids, no parent and no attributes
        """
        id_generator = id_generator or runtime_config.get_id_generator()
        sampler = sampler or runtime_config.get_sampler()
        return cls(
            trace_id=id_generator.random_id(),
            span_id=id_generator.random_id(),
            sampled=sampler.should_sample(id_generator).sampled,
        )

    def new_child(self, id_generator: Optional["IdGenerator"] = None) -> "TraceContext":
        """
        Derive the context of a child span.

        The child shares the trace id and sampling decision, records this
        span as its parent and starts from a snapshot of the attributes.
        """
        id_generator = id_generator or runtime_config.get_id_generator()
        return TraceContext(
            trace_id=self._trace_id,
            span_id=id_generator.random_id(),
            parent_span_id=self._span_id,
            sampled=self._sampled,
            attributes=self._attributes.snapshot(),
        )

    def is_root(self) -> bool:
        return self._parent_span_id == 0

    def set_attribute(self, key: str, value: str) -> None:
        """Set a trace attribute, inherited by children derived afterwards."""
        self._attributes.set(key, value)

    def get_attribute(self, key: str) -> Optional[str]:
        """Return the attribute value, or None when unset."""
        return self._attributes.get(key)

    def all_attributes(self) -> Dict[str, str]:
        """Return a copy of every trace attribute."""
        return self._attributes.snapshot()

    def __repr__(self) -> str:
        return (
            f"TraceContext(trace_id={self._trace_id:016x}, span_id={self._span_id:016x}, "
            f"parent_span_id={self._parent_span_id:016x}, sampled={self._sampled})"
        )


def new_root(
    id_generator: Optional["IdGenerator"] = None,
    sampler: Optional["Sampler"] = None,
) -> TraceContext:
    """Create a root trace context."""
    return TraceContext.new_root(id_generator=id_generator, sampler=sampler)


def new_child(parent: TraceContext, id_generator: Optional["IdGenerator"] = None) -> TraceContext:
    """Derive a child of ``parent``."""
    return parent.new_child(id_generator=id_generator)
