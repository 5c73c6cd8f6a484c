"""Per-owner serialization of mutating document operations."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class OwnerLockRegistry:
    """Lazily created mutex per owner ``uuid``.

    Mutations for one owner run one at a time; different owners proceed in
    parallel. Entries are never removed, so the registry grows with the
    number of distinct owners seen by this process.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, uuid: str) -> threading.Lock:
        """Return the mutex for ``uuid``, creating it on first use."""
        with self._guard:
            lock = self._locks.get(uuid)
            if lock is None:
                lock = threading.Lock()
                self._locks[uuid] = lock
            return lock

    @contextmanager
    def hold(self, uuid: str) -> Iterator[None]:
        """Hold the owner mutex for the duration of a block."""
        lock = self.lock_for(uuid)
        with lock:
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
