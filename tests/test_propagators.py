"""Tests for the HTTP header codec."""

import pytest

from tracelink.context import TraceContext
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
from tracelink.errors import DecodeError, PropagationError
from tracelink.tracer import Span, SpanPropagator, StandardPropagator


class MapPropagator(SpanPropagator):
    """Propagator that emits fixed maps and records what it is asked to join."""

    def __init__(self, context_ids=None, attributes=None):
        self.context_ids = context_ids or {}
        self.attributes = attributes or {}
        self.joined = []

    def propagate_span_as_text(self, span):
        return dict(self.context_ids), dict(self.attributes)

    def join_trace_from_text(self, operation_name, context_ids, attributes):
        self.joined.append((operation_name, context_ids, attributes))
        return Span(operation_name, TraceContext(trace_id=1, span_id=2, attributes=attributes))


class FailingPropagator(MapPropagator):
    def join_trace_from_text(self, operation_name, context_ids, attributes):
        raise KeyError("traceid")


def _span():
    return Span("op", TraceContext(trace_id=1, span_id=2))


@pytest.mark.parametrize(
    "attributes",
    [
        {},
        {"user": "alice"},
        {"user": "alice", "tenant": "acme", "region": "eu-west-1"},
        {"query": "a&b=c", "pct": "100%", "space": "hello world", "plus": "1+1"},
        {"unicode": "café 日本", "emoji": "\U0001F600"},
    ],
)
def test_maps_round_trip_through_headers(attributes):
    """Decoded identity and attribute maps equal the originals."""
    context_ids = {"traceid": "abc", "spanid": "def", "sampled": "true"}
    out = MapPropagator(context_ids, attributes)
    headers = propagate_to_headers(_span(), out)

    receiver = MapPropagator()
    join_from_headers("op", headers, receiver)

    assert receiver.joined == [("op", context_ids, attributes)]


def test_header_names_and_escaping():
    propagator = MapPropagator({"traceid": "1"}, {"q": "a b&c=d%"})
    headers = propagate_to_headers(_span(), propagator)

    assert list(headers.items()) == [
        ("Open-Tracing-Context-Id-traceid", "1"),
        ("Open-Tracing-Trace-Tags-q", "a+b%26c%3Dd%25"),
    ]


def test_prefix_constants_are_exact():
    assert CONTEXT_ID_HTTP_HEADER_PREFIX == "Open-Tracing-Context-Id-"
    assert TAGS_HTTP_HEADER_PREFIX == "Open-Tracing-Trace-Tags-"


def test_propagate_appends_to_existing_headers():
    headers = HeaderSet([("Accept", "text/plain")])
    propagator = MapPropagator({"traceid": "1"}, {"user": "alice"})

    result = propagate_to_headers(_span(), propagator, headers)
    propagate_to_headers(_span(), MapPropagator({}, {"user": "bob"}), headers)

    assert result is headers
    assert headers.get("Accept") == "text/plain"
    assert headers.get_all("Open-Tracing-Trace-Tags-user") == ["alice", "bob"]


def test_repeated_header_uses_first_value():
    headers = [
        ("Open-Tracing-Trace-Tags-user", "alice"),
        ("Open-Tracing-Trace-Tags-user", "bob"),
    ]
    receiver = MapPropagator()
    join_from_headers("op", headers, receiver)

    assert receiver.joined[0][2] == {"user": "alice"}


def test_repeated_header_in_mapping_uses_first_value():
    receiver = MapPropagator()
    join_from_headers("op", {"Open-Tracing-Context-Id-traceid": ["7", "8"]}, receiver)

    assert receiver.joined[0][1] == {"traceid": "7"}


def test_later_malformed_duplicate_is_ignored():
    headers = [
        ("Open-Tracing-Trace-Tags-user", "alice"),
        ("Open-Tracing-Trace-Tags-user", "%zz"),
    ]
    receiver = MapPropagator()
    join_from_headers("op", headers, receiver)

    assert receiver.joined[0][2] == {"user": "alice"}


@pytest.mark.parametrize("bad_value", ["%zz", "abc%", "%4", "%ff"])
def test_invalid_escape_fails_without_joining(bad_value):
    headers = [
        ("Open-Tracing-Context-Id-traceid", "1"),
        ("Open-Tracing-Trace-Tags-bad", bad_value),
    ]
    receiver = MapPropagator()

    with pytest.raises(DecodeError) as excinfo:
        join_from_headers("op", headers, receiver)

    assert receiver.joined == []
    assert excinfo.value.header == "Open-Tracing-Trace-Tags-bad"
    assert isinstance(excinfo.value, ValueError)


def test_propagator_errors_pass_through():
    with pytest.raises(KeyError):
        join_from_headers("op", [("Open-Tracing-Context-Id-spanid", "1")], FailingPropagator())


def test_missing_identity_raises_propagation_error():
    with pytest.raises(PropagationError):
        join_from_headers("op", {"Open-Tracing-Trace-Tags-user": "alice"}, StandardPropagator())


def test_unrelated_headers_are_ignored():
    headers = {
        "Content-Type": "application/json",
        "X-Open-Tracing-Context-Id-traceid": "1",
        "Open-Tracing-Context-Id-traceid": "2",
    }
    receiver = MapPropagator()
    join_from_headers("op", headers, receiver)

    assert receiver.joined[0][1] == {"traceid": "2"}
    assert receiver.joined[0][2] == {}


def test_lowercased_header_names_are_accepted():
    """ASGI servers lower-case header names."""
    headers = [
        ("open-tracing-context-id-traceid", "1"),
        ("open-tracing-trace-tags-user", "alice"),
    ]
    receiver = MapPropagator()
    join_from_headers("", headers, receiver)

    assert receiver.joined == [("", {"traceid": "1"}, {"user": "alice"})]


def test_empty_headers_join_empty_maps():
    receiver = MapPropagator()
    join_from_headers("op", None, receiver)

    assert receiver.joined == [("op", {}, {})]


def test_standard_propagator_round_trip():
    ctx = TraceContext(trace_id=0xDEADBEEF, span_id=0xFEEDFACE, parent_span_id=0xCAFE, sampled=True)
    ctx.set_attribute("user id", "a&b=c %é")
    propagator = StandardPropagator()

    headers = propagate_to_headers(Span("send", ctx), propagator)
    joined = join_from_headers("receive", headers, propagator)

    assert joined.operation_name == "receive"
    assert joined.context.trace_id == ctx.trace_id
    assert joined.context.span_id == ctx.span_id
    assert joined.context.parent_span_id == ctx.parent_span_id
    assert joined.context.sampled is True
    assert joined.context.all_attributes() == {"user id": "a&b=c %é"}


def test_encode_decode_helpers():
    assert encode_header_value("a b/c") == "a+b%2Fc"
    assert decode_header_value("a+b%2Fc") == "a b/c"
    assert decode_header_value("%E6%97%A5") == "日"


def test_has_context_headers():
    assert has_context_headers({"Open-Tracing-Context-Id-traceid": "1"})
    assert not has_context_headers({"Open-Tracing-Trace-Tags-user": "alice"})
    assert not has_context_headers(None)


class TestHeaderSet:
    """Multi-valued header collection."""

    def test_lookup_is_case_insensitive(self):
        headers = HeaderSet([("X-Name", "1"), ("x-name", "2")])

        assert headers.get("X-NAME") == "1"
        assert headers.get_all("x-Name") == ["1", "2"]
        assert headers.to_dict() == {"X-Name": ["1", "2"]}
        assert "x-name" in headers
        assert len(headers) == 2

    def test_get_default(self):
        assert HeaderSet().get("missing", "d") == "d"

    def test_from_mapping_with_sequences(self):
        headers = HeaderSet.from_any({"A": ["1", "2"], "B": "3"})
        assert list(headers.items()) == [("A", "1"), ("A", "2"), ("B", "3")]

    def test_from_bytes_pairs(self):
        headers = HeaderSet.from_any([(b"a", b"1")])
        assert list(headers.items()) == [("a", "1")]

    def test_from_multi_items(self):
        class MultiDict:
            def multi_items(self):
                return [("k", "1"), ("k", "2")]

        assert HeaderSet.from_any(MultiDict()).get_all("k") == ["1", "2"]

    def test_from_header_set_is_identity(self):
        headers = HeaderSet()
        assert HeaderSet.from_any(headers) is headers

    def test_iterates_distinct_names(self):
        headers = HeaderSet([("A", "1"), ("B", "2"), ("a", "3")])
        assert list(headers) == ["A", "B"]
