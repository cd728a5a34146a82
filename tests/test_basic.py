"""Basic smoke tests for the public package surface."""

import pytest

import tracelink


def test_version_exposed():
    """Smoke test: version is accessible."""
    assert isinstance(tracelink.__version__, str)
    assert len(tracelink.__version__) > 0


def test_end_to_end_propagation():
    """A trace started in one process continues in another via headers."""
    client_tracer = tracelink.StandardTracer(id_generator=tracelink.RandomIdGenerator(seed=1))
    server_tracer = tracelink.StandardTracer(id_generator=tracelink.RandomIdGenerator(seed=2))

    root = client_tracer.start_trace("checkout").set_trace_attribute("cart", "42")
    outgoing = root.start_child("call-payments")
    headers = tracelink.propagate_to_headers(outgoing, client_tracer)

    remote = tracelink.join_from_headers("", headers, server_tracer)
    handled = remote.start_child("charge")

    assert handled.context.trace_id == root.context.trace_id
    assert handled.context.parent_span_id == outgoing.context.span_id
    assert handled.trace_attribute("cart") == "42"
    assert remote.operation_name == ""


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
