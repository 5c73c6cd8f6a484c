"""Process-wide readiness gate checked at every RPC entry."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from enum import Enum
from typing import Iterator


class ServiceState(str, Enum):
    """Readiness of the Document Authority Service."""

    AVAILABLE = "Available"
    UNAVAILABLE = "Unavailable"


class ServiceStateGate:
    """Readiness flag guarded by a reader/writer lock.

    Any number of readers may hold the gate at once. A writer waits for
    active readers to drain, and new readers queue behind a waiting writer so
    provisioning and shutdown toggles are never starved.
    """

    def __init__(self, initial: ServiceState = ServiceState.AVAILABLE) -> None:
        self._state = initial
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer_active = False
        self._writers_waiting = 0

    @contextmanager
    def reading(self) -> Iterator[ServiceState]:
        """Hold the gate for reading and yield the current state."""
        with self._cond:
            while self._writer_active or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield self._state
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    def current(self) -> ServiceState:
        """Return the committed state."""
        with self.reading() as state:
            return state

    def is_available(self) -> bool:
        return self.current() is ServiceState.AVAILABLE

    def set(self, state: ServiceState) -> ServiceState:
        """Commit ``state`` exclusively and return the previous state."""
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer_active or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer_active = True
        try:
            previous, self._state = self._state, state
            return previous
        finally:
            with self._cond:
                self._writer_active = False
                self._cond.notify_all()
