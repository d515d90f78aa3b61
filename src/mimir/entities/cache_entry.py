"""Cache entry domain entity."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a cached request/response pair.

    Instances are immutable. The repository keeps its own hit bookkeeping
    and hands out fresh snapshots, so holding an entity never gives access
    to cache-internal state.

    Attributes:
        request: The original inbound request (opaque to the cache)
        response: The response replayed verbatim on a hit
        embedding: The embedding vector for the request
        created_at: When this entry was created
        expires_at: When this entry stops matching (never before created_at)
        hit_count: Number of lookups that matched this entry
        last_hit_at: Time of the most recent match, None before the first one
    """

    request: Any
    response: Any
    embedding: tuple[float, ...]
    created_at: datetime
    expires_at: datetime
    hit_count: int = 0
    last_hit_at: datetime | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.embedding, tuple):
            object.__setattr__(self, "embedding", tuple(float(x) for x in self.embedding))
        if self.expires_at < self.created_at:
            raise ValueError("expires_at must not be earlier than created_at")
        if self.hit_count < 0:
            raise ValueError("hit_count must be non-negative")

    @classmethod
    def create(
        cls,
        request: Any,
        response: Any,
        embedding: Sequence[float],
        created_at: datetime,
        ttl: timedelta,
    ) -> "CacheEntryEntity":
        """Build a fresh, never-hit entry that expires ``ttl`` after creation."""
        return cls(
            request=request,
            response=response,
            embedding=tuple(embedding),
            created_at=created_at,
            expires_at=created_at + ttl,
        )

    def is_expired(self, now: datetime) -> bool:
        """Check whether the entry has expired at ``now``."""
        return self.expires_at <= now
