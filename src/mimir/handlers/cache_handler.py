"""HTTP handlers for the caching proxy.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, cache-status headers,
and error responses.
"""

import asyncio
import logging
from typing import Any

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from mimir.dto import (
    APIError,
    CacheStatsResponse,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ErrorResponse,
    HealthCheckResponse,
)
from mimir.exceptions import EmbeddingError, UpstreamError
from mimir.protocols import ChatCompletionProvider
from mimir.services import CacheService, CleanupService

logger = logging.getLogger(__name__)

CACHE_STATUS_HEADER = "X-Mimir-Cache"
SIMILARITY_HEADER = "X-Mimir-Similarity"


def _error_response(status_code: int, message: str, error_type: str) -> JSONResponse:
    body = ErrorResponse(error=APIError(message=message, type=error_type))
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


class CacheHandler:
    """HTTP handlers for the caching proxy.

    This handler delegates cache logic to CacheService, forwards misses to
    the upstream provider, and handles HTTP-specific concerns like:
    - Cache-status headers on every completion
    - Relaying upstream errors
    - Converting stats to DTOs

    Example:
        ```python
        handler = CacheHandler(cache_service=service, upstream=upstream, cleanup=sweeper)

        @app.post("/v1/chat/completions")
        async def chat_completions(request: ChatCompletionRequest):
            return await handler.chat_completions(request)
        ```
    """

    def __init__(
        self,
        cache_service: CacheService,
        upstream: ChatCompletionProvider,
        cleanup: CleanupService | None = None,
    ) -> None:
        """Initialize the cache handler.

        Args:
            cache_service: The cache service for business logic (required).
            upstream: Provider that cache misses are forwarded to (required).
            cleanup: The expiry sweeper, reported by the health check.
        """
        self._cache = cache_service
        self._upstream = upstream
        self._cleanup = cleanup

    async def chat_completions(self, request: ChatCompletionRequest) -> JSONResponse:
        """Handle POST /v1/chat/completions requests.

        Returns:
            The cached or upstream response with an ``X-Mimir-Cache`` header
            of HIT, MISS or BYPASS
        """
        if request.stream:
            return _error_response(
                status.HTTP_400_BAD_REQUEST,
                "Streaming responses are not supported by the cache proxy",
                "invalid_request_error",
            )

        try:
            embedding = await self._cache.embed(request.cache_text())
        except EmbeddingError as e:
            logger.warning("Embedding failed, bypassing cache: %s", e)
            return await self._forward(request, cache_status="BYPASS")

        # The scan is CPU-bound and takes the store lock, so keep it off the event loop
        match = await asyncio.to_thread(self._cache.lookup, embedding)
        if match is not None:
            return JSONResponse(
                content=match.entry.response,
                headers={
                    CACHE_STATUS_HEADER: "HIT",
                    SIMILARITY_HEADER: f"{match.similarity:.4f}",
                },
            )

        return await self._forward(request, cache_status="MISS", embedding=embedding)

    async def _forward(
        self,
        request: ChatCompletionRequest,
        cache_status: str,
        embedding: list[float] | None = None,
    ) -> JSONResponse:
        try:
            body = await self._upstream.create_chat_completion(request.to_upstream())
        except UpstreamError as e:
            logger.warning("Upstream request failed with status %d", e.status_code)
            return JSONResponse(
                status_code=e.status_code,
                content=self._upstream_error_body(e),
                headers={CACHE_STATUS_HEADER: cache_status},
            )

        if embedding is not None and self._is_cacheable(body):
            await asyncio.to_thread(
                self._cache.store, request.model_dump(exclude_none=True), body, embedding
            )

        return JSONResponse(content=body, headers={CACHE_STATUS_HEADER: cache_status})

    @staticmethod
    def _is_cacheable(body: dict[str, Any]) -> bool:
        try:
            ChatCompletionResponse.model_validate(body)
        except ValidationError:
            logger.warning("Upstream response is not a chat completion, not caching it")
            return False
        return True

    @staticmethod
    def _upstream_error_body(error: UpstreamError) -> dict[str, Any]:
        return ErrorResponse(
            error=APIError(message=error.body, type="upstream_error")
        ).model_dump(exclude_none=True)

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /stats requests.

        Raises:
            HTTPException: If an error occurs while fetching stats
        """
        try:
            stats = self._cache.get_stats()

            return CacheStatsResponse(
                total_entries=stats["total_entries"],
                total_hits=stats["total_hits"],
                total_misses=stats["total_misses"],
                hit_rate=stats["hit_rate"],
                avg_similarity=stats["avg_similarity"],
                estimated_saved_usd=stats["estimated_saved_usd"],
                similarity_threshold=stats["similarity_threshold"],
                ttl_seconds=stats["ttl"],
                embedding_model=stats["embedding_model"],
            )

        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to get stats: {e}",
            ) from e

    async def clear_cache(self) -> dict:
        """Handle DELETE /cache requests."""
        await asyncio.to_thread(self._cache.clear)
        return {
            "success": True,
            "message": "Cache cleared successfully",
        }

    async def cleanup(self) -> dict:
        """Handle POST /cache/cleanup requests."""
        removed = await asyncio.to_thread(self._cache.cleanup)
        return {
            "success": True,
            "removed_count": removed,
        }

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        embedding_healthy = await self._cache.is_healthy()

        return HealthCheckResponse(
            status="healthy" if embedding_healthy else "degraded",
            cache_entries=self._cache.repository.size(),
            embedding_healthy=embedding_healthy,
            cleanup_running=self._cleanup is not None and self._cleanup.running,
        )
