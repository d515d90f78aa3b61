"""Cache statistics domain entity."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class CacheStatsEntity:
    """Point-in-time snapshot of cache statistics.

    Attributes:
        total_entries: Entries currently stored (expired ones included until cleanup)
        total_hits: Lookups that returned a match
        total_misses: Lookups that found nothing
        hit_rate: hits / (hits + misses), 0 when there were no lookups
        avg_similarity: Mean similarity of all hits, 0 without hits
        estimated_saved_usd: Upstream cost avoided, a linear estimate
    """

    total_entries: int
    total_hits: int
    total_misses: int
    hit_rate: float
    avg_similarity: float
    estimated_saved_usd: float

    def to_dict(self) -> dict[str, float | int]:
        """Convert stats to dictionary."""
        return asdict(self)
