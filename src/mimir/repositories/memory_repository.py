"""In-memory implementation of CacheStore.

Entries live in an insertion-ordered dict keyed by stable identifiers and
are compared exhaustively on every lookup. This is only suitable because
capacity is small and bounded by configuration.
"""

import logging
import threading
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime, timezone

from mimir.config import settings
from mimir.entities import CacheEntryEntity, CacheMatchEntity, CacheStatsEntity
from mimir.exceptions import CacheInvariantError
from mimir.similarity import PreparedVector
from mimir.utils import AtomicCounter, ReadWriteLock

logger = logging.getLogger(__name__)

# Similarity above which two embeddings count as the same request
DUPLICATE_SIMILARITY = 0.99


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _Slot:
    """Repository-owned record wrapping a stored entry."""

    key: str
    entry: CacheEntryEntity
    vector: PreparedVector
    hit_count: int
    last_hit_at: datetime | None

    @classmethod
    def wrap(cls, key: str, entry: CacheEntryEntity, vector: PreparedVector) -> "_Slot":
        return cls(
            key=key,
            entry=entry,
            vector=vector,
            hit_count=entry.hit_count,
            last_hit_at=entry.last_hit_at,
        )

    def snapshot(self) -> CacheEntryEntity:
        return replace(self.entry, hit_count=self.hit_count, last_hit_at=self.last_hit_at)


class InMemoryCacheRepository:
    """In-process semantic cache with exhaustive cosine-similarity search.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Concurrency:
    - ``get``, ``stats`` and ``size`` share a reader-writer lock
    - ``set``, ``delete``, ``delete_key``, ``clear`` and ``cleanup`` hold it exclusively
    - hit/miss counters are updated outside that lock

    Expired entries are skipped by ``get`` and only removed by ``cleanup``,
    which the owner runs periodically (see ``CleanupService``).
    """

    def __init__(
        self,
        max_size: int | None = None,
        cost_per_hit: float | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the in-memory cache repository.

        Args:
            max_size: Maximum number of stored entries. Defaults to settings.
            cost_per_hit: Estimated USD saved per cache hit. Defaults to settings.
            clock: Callable returning the current aware datetime.
        """
        self._max_size = settings.cache_max_size if max_size is None else max_size
        if self._max_size <= 0:
            raise ValueError(f"max_size must be positive, got {self._max_size}")
        self._cost_per_hit = settings.cache_cost_per_hit if cost_per_hit is None else cost_per_hit
        self._clock = clock or _utcnow

        self._lock = ReadWriteLock()
        self._slots: dict[str, _Slot] = {}
        # Serializes hit bookkeeping between concurrent readers
        self._hit_lock = threading.Lock()

        # Stats
        self._hits = AtomicCounter()
        self._misses = AtomicCounter()
        self._similarity_sum = AtomicCounter(0.0)

    @classmethod
    def create(
        cls,
        max_size: int | None = None,
        cost_per_hit: float | None = None,
    ) -> "InMemoryCacheRepository":
        """Factory method to create InMemoryCacheRepository with defaults.

        Args:
            max_size: Capacity. If None, uses settings.
            cost_per_hit: Savings estimate per hit. If None, uses settings.

        Returns:
            Configured InMemoryCacheRepository
        """
        return cls(max_size=max_size, cost_per_hit=cost_per_hit)

    def get(self, embedding: Sequence[float], threshold: float) -> CacheMatchEntity | None:
        """Find the most similar live entry.

        Entries are scanned in insertion order and only a strictly greater
        similarity replaces the current best, so the earliest entry wins ties.

        Args:
            embedding: The query embedding vector
            threshold: Minimum cosine similarity for a match

        Returns:
            CacheMatchEntity if found, None otherwise
        """
        now = self._clock()
        query = PreparedVector(embedding)

        with self._lock.read():
            best: _Slot | None = None
            best_similarity = 0.0

            for slot in self._slots.values():
                if slot.entry.is_expired(now):
                    continue

                similarity = query.cosine(slot.vector)
                if similarity < threshold:
                    continue
                if best is None or similarity > best_similarity:
                    best = slot
                    best_similarity = similarity

            if best is None:
                self._misses.add(1)
                return None

            # Writers are excluded while the read lock is held, so the slot
            # is still stored when its bookkeeping is updated.
            with self._hit_lock:
                best.hit_count += 1
                best.last_hit_at = now
                snapshot = best.snapshot()

        self._hits.add(1)
        self._similarity_sum.add(best_similarity)
        return CacheMatchEntity(key=best.key, entry=snapshot, similarity=best_similarity)

    def set(self, entry: CacheEntryEntity) -> str:
        """Store an entry.

        A stored entry whose embedding is a near-duplicate (similarity
        > 0.99) is overwritten in place, keeping its key and position.
        Otherwise one entry is evicted when the cache is full and the new
        entry is appended.

        Args:
            entry: The entry to store

        Returns:
            The storage key for the entry
        """
        vector = PreparedVector(entry.embedding)

        with self._lock.write():
            for slot in self._slots.values():
                if vector.cosine(slot.vector) > DUPLICATE_SIMILARITY:
                    self._slots[slot.key] = _Slot.wrap(slot.key, entry, vector)
                    return slot.key

            if len(self._slots) >= self._max_size:
                self._evict_one()

            key = uuid.uuid4().hex
            self._slots[key] = _Slot.wrap(key, entry, vector)
            return key

    def _evict_one(self) -> None:
        """Remove the entry with the earliest last-hit time.

        Entries that were never hit have no last-hit time and go first, in
        insertion order. Caller must hold the write lock.
        """
        if not self._slots:
            raise CacheInvariantError("eviction requested on an empty cache")

        victim: _Slot | None = None
        for slot in self._slots.values():
            if victim is None:
                victim = slot
                continue
            if slot.last_hit_at is None:
                if victim.last_hit_at is not None:
                    victim = slot
            elif victim.last_hit_at is not None and slot.last_hit_at < victim.last_hit_at:
                victim = slot

        assert victim is not None
        del self._slots[victim.key]
        logger.debug("Evicted cache entry %s (last hit: %s)", victim.key, victim.last_hit_at)

    def delete(self, embedding: Sequence[float]) -> bool:
        """Delete the first entry whose embedding is a near-duplicate.

        Args:
            embedding: The embedding to match

        Returns:
            True if an entry was removed, False otherwise
        """
        query = PreparedVector(embedding)

        with self._lock.write():
            for key, slot in self._slots.items():
                if query.cosine(slot.vector) > DUPLICATE_SIMILARITY:
                    del self._slots[key]
                    return True
        return False

    def delete_key(self, key: str) -> bool:
        """Delete a specific entry by key.

        Args:
            key: The storage key to delete

        Returns:
            True if deleted, False otherwise
        """
        with self._lock.write():
            return self._slots.pop(key, None) is not None

    def clear(self) -> None:
        """Remove all entries and reset counters."""
        with self._lock.write():
            self._slots = {}
            self._hits.store(0)
            self._misses.store(0)
            self._similarity_sum.store(0.0)

    def stats(self) -> CacheStatsEntity:
        """Get cache statistics.

        Returns:
            CacheStatsEntity snapshot
        """
        with self._lock.read():
            total_entries = len(self._slots)

        hits = int(self._hits.load())
        misses = int(self._misses.load())
        total = hits + misses

        hit_rate = hits / total if total > 0 else 0.0
        avg_similarity = self._similarity_sum.load() / hits if hits > 0 else 0.0

        return CacheStatsEntity(
            total_entries=total_entries,
            total_hits=hits,
            total_misses=misses,
            hit_rate=hit_rate,
            avg_similarity=avg_similarity,
            estimated_saved_usd=hits * self._cost_per_hit,
        )

    def cleanup(self) -> int:
        """Remove expired entries.

        Returns:
            Number of entries removed
        """
        now = self._clock()

        with self._lock.write():
            active = {key: slot for key, slot in self._slots.items() if not slot.entry.is_expired(now)}
            removed = len(self._slots) - len(active)
            self._slots = active

        if removed:
            logger.debug("Removed %d expired cache entries", removed)
        return removed

    def size(self) -> int:
        """Count entries currently stored."""
        with self._lock.read():
            return len(self._slots)

    @property
    def max_size(self) -> int:
        """Get the configured capacity."""
        return self._max_size
