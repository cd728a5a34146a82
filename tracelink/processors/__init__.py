"""Sampling policy for new traces."""

from tracelink.processors.sampler import DEFAULT_SAMPLE_ONE_IN, Sampler, SamplingResult

__all__ = [
    "DEFAULT_SAMPLE_ONE_IN",
    "Sampler",
    "SamplingResult",
]
