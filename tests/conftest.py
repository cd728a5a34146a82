"""Shared fixtures for tracelink tests."""

import logging
from typing import Iterable, List

import pytest

from tracelink import runtime_config
from tracelink.ids import IdGenerator


class SequenceIdGenerator(IdGenerator):
    """Id generator that replays a fixed list of ids."""

    def __init__(self, ids: Iterable[int]) -> None:
        self._ids: List[int] = list(ids)
        self._next = 0

    def random_id(self) -> int:
        value = self._ids[self._next]
        self._next += 1
        return value


@pytest.fixture(autouse=True)
def reset_runtime_config():
    """Each test starts from default runtime settings."""
    runtime_config.reset()
    yield
    runtime_config.reset()
    logging.getLogger("tracelink").setLevel(logging.NOTSET)


@pytest.fixture
def sequence_ids():
    return SequenceIdGenerator
