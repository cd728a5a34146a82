"""Lock-protected storage for trace attributes (baggage)."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Mapping, Optional


class ReadWriteLock:
    """
    Reader/writer lock built on ``threading.Condition``.

    Any number of readers may hold the lock together. A writer is exclusive
    against readers and other writers. Waiting writers block new readers so
    a steady stream of readers cannot starve them.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class AttributeStore:
    """
    String-to-string attribute map owned by exactly one trace context.

    Every access goes through the store's own ``ReadWriteLock``; the live
    dict is never handed out.
    """

    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._lock = ReadWriteLock()
        self._attrs: Dict[str, str] = dict(initial) if initial else {}

    def set(self, key: str, value: str) -> None:
        with self._lock.write_locked():
            self._attrs[key] = value

    def get(self, key: str) -> Optional[str]:
        with self._lock.read_locked():
            return self._attrs.get(key)

    def snapshot(self) -> Dict[str, str]:
        """Return a consistent copy of all attributes."""
        with self._lock.read_locked():
            return dict(self._attrs)

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._attrs)

    def __contains__(self, key: object) -> bool:
        with self._lock.read_locked():
            return key in self._attrs

    def __repr__(self) -> str:
        return f"AttributeStore({self.snapshot()!r})"
