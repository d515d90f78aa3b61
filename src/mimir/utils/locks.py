"""Thread synchronization helpers for the in-memory cache."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class ReadWriteLock:
    """Reader-writer lock built on ``threading.Condition``.

    Any number of readers may hold the lock together; a writer holds it
    alone. Waiting writers block new readers so writes are not starved.
    The lock is not re-entrant.

    Example:
        ```python
        lock = ReadWriteLock()
        with lock.read():
            ...
        with lock.write():
            ...
        ```
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        """Hold the lock in shared mode."""
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        """Hold the lock in exclusive mode."""
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class AtomicCounter:
    """Numeric counter whose updates are serialized by its own mutex."""

    def __init__(self, initial: float = 0) -> None:
        self._value = initial
        self._lock = threading.Lock()

    def add(self, delta: float = 1) -> float:
        """Add ``delta`` and return the new value."""
        with self._lock:
            self._value += delta
            return self._value

    def load(self) -> float:
        with self._lock:
            return self._value

    def store(self, value: float) -> None:
        with self._lock:
            self._value = value
