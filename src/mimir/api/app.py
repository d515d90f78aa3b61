from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mimir.api.dependencies import HandlerDep, make_lifespan
from mimir.config import configure_logging, settings
from mimir.dto import CacheStatsResponse, ChatCompletionRequest, HealthCheckResponse
from mimir.protocols import CacheStore, ChatCompletionProvider, EmbeddingProvider

VERSION = "0.1.0"


def create_app(
    embedding_provider: EmbeddingProvider | None = None,
    upstream: ChatCompletionProvider | None = None,
    repository: CacheStore | None = None,
    cleanup_interval: float | None = None,
) -> FastAPI:
    """Create the caching proxy application.

    Collaborators left as None are built from settings when the app starts.
    """
    app = FastAPI(
        title="Mimir",
        description="Semantic cache proxy for OpenAI-compatible LLM APIs",
        version=VERSION,
        lifespan=make_lifespan(
            embedding_provider=embedding_provider,
            upstream=upstream,
            repository=repository,
            cleanup_interval=cleanup_interval,
        ),
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Mimir",
            "version": VERSION,
            "description": "Semantic cache proxy for OpenAI-compatible LLM APIs",
            "endpoints": {
                "chat": "/v1/chat/completions",
                "stats": "/stats",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.post("/v1/chat/completions")
    async def chat_completions(request: ChatCompletionRequest, handler: HandlerDep) -> JSONResponse:
        """Serve a chat completion from cache, or forward it upstream."""
        return await handler.chat_completions(request)

    @app.get("/stats", response_model=CacheStatsResponse)
    async def get_stats(handler: HandlerDep) -> CacheStatsResponse:
        """Get cache statistics."""
        return await handler.get_stats()

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return await handler.health_check()

    @app.delete("/cache")
    async def clear_cache(handler: HandlerDep) -> dict:
        """Clear all entries from the cache."""
        return await handler.clear_cache()

    @app.post("/cache/cleanup")
    async def cleanup_cache(handler: HandlerDep) -> dict:
        """Remove expired entries now."""
        return await handler.cleanup()

    return app


configure_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "mimir.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
