"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from mimir.services import CacheService, CleanupService

    cache = CacheService(repository=repo, embedding_provider=provider)
    sweeper = CleanupService(repo)
    sweeper.start()
    ```
"""

from .cache_service import CacheService
from .cleanup_service import CleanupService

__all__ = [
    "CacheService",
    "CleanupService",
]
