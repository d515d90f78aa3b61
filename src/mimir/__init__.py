"""Mimir - semantic response cache for LLM API calls.

This package provides a layered architecture for semantic caching:

Layers:
    - protocols: Interface contracts (CacheStore, EmbeddingProvider, ChatCompletionProvider)
    - repositories: Storage and external service implementations
    - services: Business logic and the expiry sweeper
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from mimir.repositories import InMemoryCacheRepository
    from mimir.services import CleanupService

    cache = InMemoryCacheRepository(max_size=1000)
    with CleanupService(cache, interval=60):
        match = cache.get(embedding, threshold=0.95)
    ```

For HTTP API:
    ```python
    from mimir.api.app import app
    ```
"""

from mimir.config import settings
from mimir.entities import CacheEntryEntity, CacheMatchEntity, CacheStatsEntity
from mimir.exceptions import (
    CacheBackendError,
    CacheInvariantError,
    EmbeddingError,
    MimirError,
    UpstreamError,
)
from mimir.protocols import CacheStore, ChatCompletionProvider, EmbeddingProvider
from mimir.repositories import InMemoryCacheRepository, OllamaEmbeddingProvider, OpenAIUpstreamClient
from mimir.services import CacheService, CleanupService
from mimir.similarity import cosine_similarity, euclidean_distance, normalize

__all__ = [
    # Configuration
    "settings",
    # Vector math
    "cosine_similarity",
    "euclidean_distance",
    "normalize",
    # Protocols (interfaces)
    "CacheStore",
    "ChatCompletionProvider",
    "EmbeddingProvider",
    # Services
    "CacheService",
    "CleanupService",
    # Repositories
    "InMemoryCacheRepository",
    "OllamaEmbeddingProvider",
    "OpenAIUpstreamClient",
    # Entities (domain models)
    "CacheEntryEntity",
    "CacheMatchEntity",
    "CacheStatsEntity",
    # Errors
    "MimirError",
    "CacheBackendError",
    "CacheInvariantError",
    "EmbeddingError",
    "UpstreamError",
]
