"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (memory → other backends, Ollama → local, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from mimir.protocols import CacheStore, EmbeddingProvider

    # Type hints work with any implementation
    store: CacheStore = InMemoryCacheRepository()
    provider: EmbeddingProvider = OllamaEmbeddingProvider()
    ```
"""

from .cache_store import CacheStore
from .chat_completion_provider import ChatCompletionProvider
from .embedding_provider import EmbeddingProvider

__all__ = [
    "CacheStore",
    "ChatCompletionProvider",
    "EmbeddingProvider",
]
