"""OpenAI-compatible embedding provider.

Calls ``POST {base_url}/embeddings`` on the same kind of API the proxy
forwards chat completions to, so no separate embedding server is needed.

Models available:
- text-embedding-3-small (1536 dims)
- text-embedding-3-large (3072 dims)
- text-embedding-ada-002 (1536 dims)
"""

import httpx
from pydantic import ValidationError

from mimir.config import settings
from mimir.dto import EmbeddingRequest, EmbeddingResponse
from mimir.exceptions import EmbeddingError


class OpenAIEmbeddingProvider:
    """httpx implementation of the EmbeddingProvider protocol.

    Example:
        ```python
        provider = OpenAIEmbeddingProvider.create(model_name="text-embedding-3-small")
        vectors = await provider.encode_batch(["first", "second"])
        ```
    """

    MODEL_DIMENSIONS = {
        "text-embedding-3-small": 1536,
        "text-embedding-3-large": 3072,
        "text-embedding-ada-002": 1536,
    }
    DEFAULT_DIMENSION = 1536

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
        dimensions: int | None = None,
    ) -> None:
        """Initialize the OpenAI embedding provider.

        Args:
            model_name: Embedding model. Defaults to settings.openai_embedding_model.
            base_url: API base URL. Defaults to settings.upstream_base_url.
            api_key: Bearer token. Defaults to settings.openai_api_key.
            timeout: Request timeout in seconds. Defaults to settings.
            client: Preconfigured HTTP client (mainly for tests).
            dimensions: Requested output size, for models that can shorten vectors.
        """
        self._model_name = model_name or settings.openai_embedding_model
        self._base_url = (base_url or settings.upstream_base_url).rstrip("/")
        self._api_key = api_key if api_key is not None else settings.openai_api_key
        self._timeout = timeout or settings.upstream_timeout
        self._client = client
        self._dimensions = dimensions

    @classmethod
    def create(cls, model_name: str | None = None, base_url: str | None = None) -> "OpenAIEmbeddingProvider":
        """Factory method to create OpenAIEmbeddingProvider with defaults."""
        return cls(model_name=model_name, base_url=base_url)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    @property
    def dimension(self) -> int:
        """Get the embedding vector dimension."""
        if self._dimensions is not None:
            return self._dimensions
        return self.MODEL_DIMENSIONS.get(self._model_name, self.DEFAULT_DIMENSION)

    @property
    def model_name(self) -> str:
        return self._model_name

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Raises:
            EmbeddingError: If the request fails or the reply has no vector
        """
        return (await self.encode_batch([text]))[0]

    async def encode_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for multiple texts in one request.

        Returns:
            One vector per input text, in input order

        Raises:
            EmbeddingError: If the request fails or the reply does not match the input
        """
        if not texts:
            return []

        payload = EmbeddingRequest(model=self._model_name, input=texts, dimensions=self._dimensions)
        url = f"{self._base_url}/embeddings"

        try:
            response = await self.client.post(
                url, json=payload.model_dump(exclude_none=True), headers=self._headers()
            )
            response.raise_for_status()
            reply = EmbeddingResponse.model_validate(response.json())
        except httpx.HTTPError as e:
            raise EmbeddingError(f"OpenAI embeddings API error: {e}") from e
        except (ValueError, ValidationError) as e:
            raise EmbeddingError(f"Unexpected embeddings response: {e}") from e

        vectors = reply.vectors()
        if len(vectors) != len(texts):
            raise EmbeddingError(f"Expected {len(texts)} embeddings, got {len(vectors)}")
        return vectors

    async def is_available(self) -> bool:
        """Check if the embeddings endpoint answers.

        Returns:
            True if a test embedding succeeds, False otherwise
        """
        try:
            await self.encode("test")
            return True
        except EmbeddingError:
            return False

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
