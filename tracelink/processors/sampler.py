"""Sampling decisions for traces."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tracelink.ids import IdGenerator

DEFAULT_SAMPLE_ONE_IN = 64


@dataclass
class SamplingResult:
    sampled: bool


class Sampler:
    """Head-based sampler that keeps one trace in ``one_in``."""

    def __init__(self, one_in: int = DEFAULT_SAMPLE_ONE_IN) -> None:
        if isinstance(one_in, bool) or not isinstance(one_in, int) or one_in < 1:
            raise ValueError("one_in must be an integer >= 1")
        self.one_in = one_in

    def should_sample(self, id_generator: "IdGenerator") -> SamplingResult:
        # Separate draw so the decision does not depend on the trace id.
        return SamplingResult(sampled=id_generator.random_id() % self.one_in == 0)

    def __repr__(self) -> str:
        return f"Sampler(one_in={self.one_in})"
