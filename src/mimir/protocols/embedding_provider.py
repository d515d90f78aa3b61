"""Embedding provider protocol.

Defines the interface for any embedding generation service that can
convert text to vector embeddings.

Implementations can include:
- Ollama (local HTTP API, default)
- sentence-transformers (in-process)
- OpenAI / Cohere / HuggingFace inference APIs
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Protocol for embedding generation services.

    Similar to Go's interface pattern - any type that implements these
    methods satisfies the protocol, no explicit inheritance needed.

    Example:
        ```python
        from mimir.protocols import EmbeddingProvider

        provider: EmbeddingProvider = OllamaEmbeddingProvider.create()
        provider: EmbeddingProvider = LocalEmbeddingProvider.create()
        ```
    """

    @property
    def dimension(self) -> int:
        """Return the dimension of the embedding vectors.

        Returns:
            The vector dimension (e.g., 768 for nomic-embed-text)
        """
        ...

    @property
    def model_name(self) -> str:
        """Return the name/identifier of the model.

        Returns:
            Model name or identifier
        """
        ...

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Args:
            text: The text to encode

        Returns:
            The embedding vector as a list of floats

        Raises:
            EmbeddingError: If the backend cannot produce a vector
        """
        ...

    async def encode_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for multiple texts.

        Backends without native batching may encode sequentially.

        Args:
            texts: List of texts to encode

        Returns:
            List of embedding vectors, in input order
        """
        ...

    async def is_available(self) -> bool:
        """Check if the embedding provider is available.

        Returns:
            True if available, False otherwise
        """
        ...
