"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from mimir.config import settings
from mimir.handlers import CacheHandler
from mimir.protocols import CacheStore, ChatCompletionProvider, EmbeddingProvider
from mimir.repositories import (
    InMemoryCacheRepository,
    OllamaEmbeddingProvider,
    OpenAIEmbeddingProvider,
    OpenAIUpstreamClient,
)
from mimir.services import CacheService, CleanupService

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> CacheHandler:
    """Dependency injection for CacheHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "cache_handler", None)
    if handler is None:
        raise RuntimeError("CacheHandler not initialized. Check lifespan setup.")
    return handler


def default_embedding_provider() -> EmbeddingProvider:
    """Build the embedding provider selected by EMBEDDING_PROVIDER."""
    if settings.uses_local_embeddings:
        from mimir.repositories.local_embedding_provider import LocalEmbeddingProvider

        return LocalEmbeddingProvider.create()
    if settings.uses_openai_embeddings:
        return OpenAIEmbeddingProvider.create()
    return OllamaEmbeddingProvider.create()


async def _close(resource: object) -> None:
    close = getattr(resource, "close", None)
    if close is not None:
        await close()


def make_lifespan(
    embedding_provider: EmbeddingProvider | None = None,
    upstream: ChatCompletionProvider | None = None,
    repository: CacheStore | None = None,
    cleanup_interval: float | None = None,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Build the lifespan context manager for the FastAPI app.

    Any collaborator left as None is created from settings.

    Initializes all layers and stores them in app.state:
    1. Repository, embedding provider and upstream client
    2. Service (business logic) - app.state.cache_service
    3. Cleanup sweeper, started here and stopped on shutdown
    4. Handler (HTTP endpoints) - app.state.cache_handler
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Only clients built here are closed on shutdown; injected ones belong to the caller
        owned: list[object] = []
        provider = embedding_provider
        if provider is None:
            provider = default_embedding_provider()
            owned.append(provider)
        client = upstream
        if client is None:
            client = OpenAIUpstreamClient.create()
            owned.append(client)
        store = repository or InMemoryCacheRepository.create()

        cache_service = CacheService.create(repository=store, embedding_provider=provider)
        cleanup = CleanupService(store, interval=cleanup_interval)
        cache_handler = CacheHandler(cache_service=cache_service, upstream=client, cleanup=cleanup)

        app.state.cache_service = cache_service
        app.state.cache_handler = cache_handler
        app.state.cleanup_service = cleanup

        cleanup.start()
        logger.info(
            "Cache service initialized (threshold %.2f, ttl %ds, model %s)",
            cache_service.threshold,
            cache_service.ttl,
            provider.model_name,
        )

        try:
            yield
        finally:
            cleanup.stop()
            for resource in owned:
                await _close(resource)

            del app.state.cache_handler
            del app.state.cache_service
            del app.state.cleanup_service
            logger.info("Cache service shut down")

    return lifespan


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[CacheHandler, Depends(get_handler)]
