"""Per-key mutual exclusion for stock mutations.

Two conversions that touch the same (product, location) record must not
interleave their read-check-write; conversions on different records may
run in parallel.
"""

from __future__ import annotations

import threading
from collections.abc import Hashable, Iterator
from contextlib import contextmanager


class KeyedLock:

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.Lock] = {}

    def _lock_for(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        lock = self._lock_for(key)
        with lock:
            yield
