"""Ollama-based embedding provider.

Uses Ollama's local API to generate embeddings. Ollama serves models locally
without requiring HuggingFace authentication or downloading models manually.

Requirements:
    - Ollama installed: https://ollama.com
    - Model pulled: `ollama pull nomic-embed-text`
    - Ollama running: `ollama serve` (usually runs automatically)

Models available:
- nomic-embed-text (137M params, 768 dims)
- mxbai-embed-large (335M params, 1024 dims)
- all-minilm (22M params, 384 dims)
- embeddinggemma (308M params, 768 dims)
"""

import httpx

from mimir.config import settings
from mimir.exceptions import EmbeddingError


class OllamaEmbeddingProvider:
    """Ollama-based implementation of EmbeddingProvider protocol.

    This class satisfies the EmbeddingProvider protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        provider = OllamaEmbeddingProvider.create(
            model_name="nomic-embed-text",
            base_url="http://localhost:11434"
        )

        embedding = await provider.encode("Hello, world!")
        print(len(embedding))  # 768
        ```
    """

    # Known model dimensions (for common models)
    MODEL_DIMENSIONS = {
        "nomic-embed-text": 768,
        "mxbai-embed-large": 1024,
        "all-minilm": 384,
        "all-minilm:l6-v2": 384,
        "embeddinggemma": 768,
        "embeddinggemma:300m": 768,
    }
    DEFAULT_DIMENSION = 768

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Ollama embedding provider.

        Args:
            model_name: Name of the Ollama model.
                       Defaults to settings.embedding_model.
            base_url: Ollama API base URL.
                     Defaults to settings.ollama_base_url.
            timeout: Request timeout in seconds.
            client: Preconfigured HTTP client (mainly for tests).
        """
        self._model_name = model_name or settings.embedding_model
        self._base_url = (base_url or settings.ollama_base_url).rstrip("/")
        self._timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @classmethod
    def create(
        cls,
        model_name: str | None = None,
        base_url: str | None = None,
    ) -> "OllamaEmbeddingProvider":
        """Factory method to create OllamaEmbeddingProvider with defaults.

        Args:
            model_name: Model name. If None, uses settings.
            base_url: Ollama API URL. If None, uses settings.

        Returns:
            Configured OllamaEmbeddingProvider
        """
        return cls(model_name=model_name, base_url=base_url)

    @property
    def dimension(self) -> int:
        """Get the embedding vector dimension.

        Unknown models report 768.
        """
        return self.MODEL_DIMENSIONS.get(self._model_name, self.DEFAULT_DIMENSION)

    @property
    def model_name(self) -> str:
        """Get the model name/identifier."""
        return self._model_name

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Args:
            text: The text to encode

        Returns:
            The embedding vector as a list of floats

        Raises:
            EmbeddingError: If the Ollama request fails or the reply has no vector
        """
        url = f"{self._base_url}/api/embed"
        payload = {
            "model": self._model_name,
            "input": text,
        }

        try:
            response = await self.client.post(url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            error_msg = f"Ollama API error: {e}"
            if isinstance(e, httpx.ConnectError):
                error_msg += " (is Ollama running? Try: ollama serve)"
            elif isinstance(e, httpx.HTTPStatusError) and e.response.status_code == 404:
                error_msg += f" (model not found? Try: ollama pull {self._model_name})"
            raise EmbeddingError(error_msg) from e

        # Ollama returns {"embeddings": [[...]]} for single input
        embedding = None
        if data.get("embeddings"):
            embedding = data["embeddings"][0]
        # Fallback: older /api/embeddings reply
        elif "embedding" in data:
            embedding = data["embedding"]

        if embedding is None:
            raise EmbeddingError(f"Unexpected response format: {data}")
        if len(embedding) == 0:
            raise EmbeddingError("Empty embedding returned")
        return [float(x) for x in embedding]

    async def encode_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for multiple texts, one request at a time.

        Raises:
            EmbeddingError: Naming the index of the first text that failed
        """
        results = []
        for i, text in enumerate(texts):
            try:
                results.append(await self.encode(text))
            except EmbeddingError as e:
                raise EmbeddingError(f"Failed to embed text {i}: {e}") from e
        return results

    async def is_available(self) -> bool:
        """Check if Ollama is running and the model answers.

        Returns:
            True if a test embedding succeeds, False otherwise
        """
        try:
            await self.encode("test")
            return True
        except EmbeddingError:
            return False

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
