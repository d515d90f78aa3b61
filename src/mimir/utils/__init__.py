"""Utility modules for mimir."""

from .locks import AtomicCounter, ReadWriteLock

__all__ = [
    "AtomicCounter",
    "ReadWriteLock",
]
