import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Cache
    cache_similarity_threshold: float = float(os.getenv("CACHE_SIMILARITY_THRESHOLD", "0.95"))
    cache_ttl: int = int(os.getenv("CACHE_TTL", "86400"))  # 24 hours default
    cache_max_size: int = int(os.getenv("CACHE_MAX_SIZE", "10000"))
    cache_cleanup_interval: float = float(os.getenv("CACHE_CLEANUP_INTERVAL", "300"))
    # Rough: $0.002 per 1K tokens, ~500 tokens per request
    cache_cost_per_hit: float = float(os.getenv("CACHE_COST_PER_HIT", "0.001"))

    # Embedding
    embedding_provider: str = os.getenv("EMBEDDING_PROVIDER", "ollama")  # "ollama", "local" or "openai"
    embedding_model: str = os.getenv("EMBEDDING_MODEL", "nomic-embed-text")
    # Used when EMBEDDING_PROVIDER=openai; requests go to UPSTREAM_BASE_URL/embeddings
    openai_embedding_model: str = os.getenv("OPENAI_EMBEDDING_MODEL", "text-embedding-3-small")

    # Ollama
    ollama_base_url: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")

    # Upstream LLM provider (OpenAI-compatible)
    upstream_base_url: str = os.getenv("UPSTREAM_BASE_URL", "https://api.openai.com/v1")
    upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT", "60"))
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8080"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def uses_local_embeddings(self) -> bool:
        """Check if embeddings are generated in-process with sentence-transformers.

        Returns:
            True for the local provider, False otherwise
        """
        return self.embedding_provider.lower() == "local"

    @property
    def uses_openai_embeddings(self) -> bool:
        """Check if embeddings come from the upstream's OpenAI-compatible endpoint."""
        return self.embedding_provider.lower() == "openai"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not 0 <= self.cache_similarity_threshold <= 1:
            raise ValueError("CACHE_SIMILARITY_THRESHOLD must be between 0 and 1 for cosine similarity")

        if self.cache_ttl <= 0:
            raise ValueError(f"CACHE_TTL must be positive, got {self.cache_ttl}")

        if self.cache_max_size <= 0:
            raise ValueError(f"CACHE_MAX_SIZE must be positive, got {self.cache_max_size}")

        if self.cache_cleanup_interval <= 0:
            raise ValueError(
                f"CACHE_CLEANUP_INTERVAL must be positive, got {self.cache_cleanup_interval}"
            )

        if self.embedding_provider.lower() not in ("ollama", "local", "openai"):
            raise ValueError(
                f"EMBEDDING_PROVIDER must be one of ['ollama', 'local', 'openai'], "
                f"got {self.embedding_provider}"
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the service process."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
