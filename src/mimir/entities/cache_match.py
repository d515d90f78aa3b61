"""Cache match domain entity."""

from dataclasses import dataclass

from .cache_entry import CacheEntryEntity


@dataclass(frozen=True)
class CacheMatchEntity:
    """Domain entity for a cache lookup hit.

    Attributes:
        key: Stable identifier of the matched entry inside the repository
        entry: Snapshot of the matched entry, hit bookkeeping included
        similarity: Cosine similarity between the query and the entry (-1 to 1)
    """

    key: str
    entry: CacheEntryEntity
    similarity: float
