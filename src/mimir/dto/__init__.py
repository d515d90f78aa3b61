"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .embeddings import EmbeddingData, EmbeddingRequest, EmbeddingResponse, EmbeddingUsage
from .requests import (
    ChatCompletionRequest,
    ContentPart,
    FunctionChoice,
    FunctionName,
    ImageContentPart,
    Message,
    TextContentPart,
)
from .responses import (
    APIError,
    CacheStatsResponse,
    ChatCompletionResponse,
    ErrorResponse,
    HealthCheckResponse,
)

__all__ = [
    "ChatCompletionRequest",
    "Message",
    "ContentPart",
    "TextContentPart",
    "ImageContentPart",
    "FunctionName",
    "FunctionChoice",
    "ChatCompletionResponse",
    "APIError",
    "ErrorResponse",
    "CacheStatsResponse",
    "HealthCheckResponse",
    "EmbeddingRequest",
    "EmbeddingResponse",
    "EmbeddingData",
    "EmbeddingUsage",
]
