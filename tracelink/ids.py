"""Identifier sources for trace and span ids."""

from __future__ import annotations

import abc
import random
from typing import Optional

from opentelemetry.sdk.trace.id_generator import IdGenerator as OTelIdGenerator

_MAX_ID_BITS = 64


class IdGenerator(OTelIdGenerator):
    """
    Capability that produces probabilistically unique 64-bit ids.

    Extends OpenTelemetry's generator interface so the same object can be
    handed to an OTel ``TracerProvider``. Trace ids are 64-bit here as well.
    """

    @abc.abstractmethod
    def random_id(self) -> int:
        """Return a non-zero unsigned 64-bit integer."""

    def generate_span_id(self) -> int:
        return self.random_id()

    def generate_trace_id(self) -> int:
        return self.random_id()


class RandomIdGenerator(IdGenerator):
    """
    Id generator backed by a private ``random.Random`` instance.

    Passing ``seed`` makes the id sequence deterministic, which is what tests
    use. Zero is reserved for "no parent" and is never returned.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._random = random.Random(seed)

    def random_id(self) -> int:
        value = self._random.getrandbits(_MAX_ID_BITS)
        while value == 0:
            value = self._random.getrandbits(_MAX_ID_BITS)
        return value
