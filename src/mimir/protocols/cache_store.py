"""Cache storage protocol.

Defines the interface for any cache storage backend that can store
request/response pairs and look them up by embedding similarity.

Implementations can include:
- In-process memory with exhaustive comparison (default)
- Any other backend able to honour the same lookup semantics
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from mimir.entities import CacheEntryEntity, CacheMatchEntity, CacheStatsEntity


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends.

    Similar to Go's interface pattern - any type that implements these
    methods satisfies the protocol, no explicit inheritance needed.

    None of these methods raise for expected outcomes. Backends that can
    fail on write (anything not memory-resident) report it by raising
    ``CacheBackendError``.

    Example:
        ```python
        from mimir.protocols import CacheStore

        store: CacheStore = InMemoryCacheRepository(max_size=1000)
        ```
    """

    def get(self, embedding: Sequence[float], threshold: float) -> CacheMatchEntity | None:
        """Find the most similar live entry.

        Args:
            embedding: The query embedding vector
            threshold: Minimum cosine similarity for a match

        Returns:
            The best match with similarity >= threshold, or None
        """
        ...

    def set(self, entry: CacheEntryEntity) -> str:
        """Store an entry, updating a near-duplicate in place if one exists.

        Args:
            entry: The fully-populated entry to store

        Returns:
            The storage key for the entry
        """
        ...

    def delete(self, embedding: Sequence[float]) -> bool:
        """Delete the entry whose embedding is a near-duplicate of ``embedding``.

        Returns:
            True if an entry was removed, False otherwise
        """
        ...

    def delete_key(self, key: str) -> bool:
        """Delete a specific entry by key.

        Returns:
            True if deleted, False otherwise
        """
        ...

    def clear(self) -> None:
        """Remove all entries and reset hit/miss counters."""
        ...

    def stats(self) -> CacheStatsEntity:
        """Get a point-in-time statistics snapshot."""
        ...

    def cleanup(self) -> int:
        """Remove expired entries.

        Returns:
            Number of entries removed
        """
        ...

    def size(self) -> int:
        """Count entries currently stored."""
        ...
