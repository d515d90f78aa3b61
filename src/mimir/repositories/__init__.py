"""Repository layer for data access.

This layer abstracts storage and external services (embedding APIs, the
upstream LLM provider) behind protocol-based interfaces. This enables:
- Easy swapping of implementations (Ollama → OpenAI → local, memory → other backends)
- Unit testing with fake implementations
- Clear separation of concerns

``LocalEmbeddingProvider`` needs the optional ``local`` extra and is
imported from its own module:

    from mimir.repositories.local_embedding_provider import LocalEmbeddingProvider
"""

from mimir.protocols import CacheStore, ChatCompletionProvider, EmbeddingProvider

from .memory_repository import InMemoryCacheRepository
from .ollama_embedding_provider import OllamaEmbeddingProvider
from .openai_embedding_provider import OpenAIEmbeddingProvider
from .upstream_client import OpenAIUpstreamClient

__all__ = [
    "CacheStore",
    "ChatCompletionProvider",
    "EmbeddingProvider",
    "InMemoryCacheRepository",
    "OllamaEmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "OpenAIUpstreamClient",
]
