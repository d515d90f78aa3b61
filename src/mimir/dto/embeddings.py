"""DTOs for the OpenAI-compatible embeddings endpoint."""

from pydantic import BaseModel, ConfigDict, Field


class EmbeddingRequest(BaseModel):
    model: str
    input: list[str] = Field(..., min_length=1)
    dimensions: int | None = None


class EmbeddingData(BaseModel):
    model_config = ConfigDict(extra="allow")

    index: int
    embedding: list[float] = Field(..., min_length=1)
    object: str = "embedding"


class EmbeddingUsage(BaseModel):
    prompt_tokens: int = 0
    total_tokens: int = 0


class EmbeddingResponse(BaseModel):
    """Reply of POST /embeddings. Items may arrive in any order."""

    model_config = ConfigDict(extra="allow")

    data: list[EmbeddingData]
    model: str | None = None
    usage: EmbeddingUsage | None = None

    def vectors(self) -> list[list[float]]:
        """Embeddings ordered by their input index."""
        return [item.embedding for item in sorted(self.data, key=lambda item: item.index)]
