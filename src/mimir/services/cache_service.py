"""Cache service for core business logic.

This service orchestrates cache operations by coordinating
the repository (storage) and embedding provider (vector generation).
"""

import asyncio
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta, timezone
from typing import Any

from mimir.config import settings
from mimir.entities import CacheEntryEntity, CacheMatchEntity
from mimir.protocols import CacheStore, EmbeddingProvider


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CacheService:
    """Core cache orchestration service.

    This service depends on PROTOCOLS, not concrete implementations:
    - CacheStore: in-memory by default
    - EmbeddingProvider: Ollama, local sentence-transformers, etc.

    Example:
        ```python
        from mimir.repositories import InMemoryCacheRepository, OllamaEmbeddingProvider
        from mimir.services import CacheService

        cache = CacheService.create(
            repository=InMemoryCacheRepository.create(),
            embedding_provider=OllamaEmbeddingProvider.create(),
            similarity_threshold=0.9,
        )
        ```
    """

    def __init__(
        self,
        repository: CacheStore,
        embedding_provider: EmbeddingProvider,
        similarity_threshold: float | None = None,
        ttl: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the cache service.

        Args:
            repository: Cache storage backend (required).
            embedding_provider: Embedding generation service (required).
            similarity_threshold: Minimum cosine similarity for hits (0-1). Defaults to settings.
            ttl: Time-to-live for cache entries in seconds. Defaults to settings.
            clock: Callable returning the current aware datetime.
        """
        self._repository = repository
        self._embeddings = embedding_provider
        self._threshold = (
            settings.cache_similarity_threshold if similarity_threshold is None else similarity_threshold
        )
        self._ttl = settings.cache_ttl if ttl is None else ttl
        self._clock = clock or _utcnow

    @classmethod
    def create(
        cls,
        repository: CacheStore,
        embedding_provider: EmbeddingProvider,
        similarity_threshold: float | None = None,
        ttl: int | None = None,
    ) -> "CacheService":
        """Factory method to create CacheService with sensible defaults.

        Args:
            repository: Cache storage backend (required).
            embedding_provider: Embedding generation service (required).
            similarity_threshold: Min similarity for cache hits. If None, uses settings.
            ttl: Time-to-live in seconds. If None, uses settings.

        Returns:
            Configured CacheService instance
        """
        return cls(
            repository=repository,
            embedding_provider=embedding_provider,
            similarity_threshold=similarity_threshold,
            ttl=ttl,
        )

    async def embed(self, text: str) -> list[float]:
        """Generate the cache embedding for a request text."""
        return await self._embeddings.encode(text)

    def lookup(
        self,
        embedding: Sequence[float],
        threshold: float | None = None,
    ) -> CacheMatchEntity | None:
        """Look up a precomputed embedding.

        Args:
            embedding: The query vector
            threshold: Override default similarity threshold

        Returns:
            CacheMatchEntity if found, None otherwise
        """
        threshold = self._threshold if threshold is None else threshold
        return self._repository.get(embedding, threshold)

    async def check(
        self,
        prompt: str,
        threshold: float | None = None,
    ) -> CacheMatchEntity | None:
        """Check cache for a semantically similar prompt.

        Args:
            prompt: The prompt to search for
            threshold: Override default similarity threshold

        Returns:
            CacheMatchEntity if found, None otherwise
        """
        vector = await self.embed(prompt)
        return await asyncio.to_thread(self.lookup, vector, threshold)

    def store(
        self,
        request: Any,
        response: Any,
        embedding: Sequence[float],
    ) -> str:
        """Store a request/response pair under an already computed embedding.

        The entry expires ``ttl`` seconds from now.

        Returns:
            The storage key for the entry
        """
        entry = CacheEntryEntity.create(
            request=request,
            response=response,
            embedding=embedding,
            created_at=self._clock(),
            ttl=timedelta(seconds=self._ttl),
        )
        return self._repository.set(entry)

    async def store_prompt(self, prompt: str, response: Any, request: Any = None) -> str:
        """Embed ``prompt`` and store the pair.

        Args:
            prompt: The prompt text to embed
            response: The response to cache
            request: Original request to keep with the entry. Defaults to the prompt.

        Returns:
            The storage key for the entry
        """
        vector = await self.embed(prompt)
        return await asyncio.to_thread(
            self.store, request if request is not None else prompt, response, vector
        )

    async def delete_prompt(self, prompt: str) -> bool:
        """Delete the entry stored for a near-identical prompt.

        Returns:
            True if an entry was removed, False otherwise
        """
        vector = await self.embed(prompt)
        return await asyncio.to_thread(self._repository.delete, vector)

    def clear(self) -> None:
        """Clear all cache entries and counters."""
        self._repository.clear()

    def cleanup(self) -> int:
        """Remove expired entries now.

        Returns:
            Number of entries removed
        """
        return self._repository.cleanup()

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with cache statistics and configuration
        """
        stats = self._repository.stats().to_dict()
        stats["similarity_threshold"] = self._threshold
        stats["ttl"] = self._ttl
        stats["embedding_model"] = self._embeddings.model_name
        stats["embedding_dimension"] = self._embeddings.dimension
        return stats

    async def is_healthy(self) -> bool:
        """Check if the embedding provider is reachable.

        The in-memory repository is always available.
        """
        return await self._embeddings.is_available()

    def set_threshold(self, threshold: float) -> None:
        """Update the similarity threshold.

        Args:
            threshold: New threshold value (0-1, higher = more strict)
        """
        if not 0 <= threshold <= 1:
            raise ValueError("Threshold must be between 0 and 1")
        self._threshold = threshold

    @property
    def threshold(self) -> float:
        """Get current similarity threshold."""
        return self._threshold

    @property
    def ttl(self) -> int:
        """Get entry time-to-live in seconds."""
        return self._ttl

    @property
    def repository(self) -> CacheStore:
        """Get the underlying repository (for testing)."""
        return self._repository

    @property
    def embedding_provider(self) -> EmbeddingProvider:
        """Get the underlying embedding provider (for testing)."""
        return self._embeddings
