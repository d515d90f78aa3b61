"""Response DTOs for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from .requests import Message


class Usage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class Choice(BaseModel):
    model_config = ConfigDict(extra="allow")

    index: int
    message: Message
    finish_reason: str | None = None


class ChatCompletionResponse(BaseModel):
    """Response DTO for a chat completion, as returned by the upstream."""

    model_config = ConfigDict(extra="allow")

    id: str
    object: str = "chat.completion"
    created: int
    model: str
    choices: list[Choice]
    usage: Usage | None = None
    system_fingerprint: str | None = None


class APIError(BaseModel):
    message: str
    type: str
    param: str | None = None
    code: str | None = None


class ErrorResponse(BaseModel):
    """OpenAI-style error envelope."""

    error: APIError


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    total_entries: int = Field(..., description="Number of stored entries", ge=0)
    total_hits: int = Field(..., description="Lookups that returned a cached response", ge=0)
    total_misses: int = Field(..., description="Lookups forwarded upstream", ge=0)
    hit_rate: float = Field(..., description="hits / (hits + misses)", ge=0.0, le=1.0)
    avg_similarity: float = Field(..., description="Mean similarity of cache hits")
    estimated_saved_usd: float = Field(..., description="Estimated upstream cost avoided", ge=0.0)
    similarity_threshold: float = Field(..., description="Current similarity threshold", ge=0.0, le=1.0)
    ttl_seconds: int = Field(..., description="Time-to-live for cache entries in seconds", ge=0)
    embedding_model: str = Field(..., description="Model used to embed requests")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'degraded'")
    cache_entries: int = Field(..., description="Number of stored entries", ge=0)
    embedding_healthy: bool = Field(..., description="Whether the embedding service is reachable")
    cleanup_running: bool = Field(..., description="Whether the expiry sweeper is running")
