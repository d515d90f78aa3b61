"""Local sentence-transformers embedding provider.

Runs sentence-transformers models in-process. No API calls required.

Requires the ``local`` extra:
    pip install "mimir[local]"
"""

import asyncio
import logging
import time

import numpy as np
from sentence_transformers import SentenceTransformer

from mimir.config import settings
from mimir.exceptions import EmbeddingError

logger = logging.getLogger(__name__)


class LocalEmbeddingProvider:
    """Local sentence-transformers implementation of EmbeddingProvider.

    This class satisfies the EmbeddingProvider protocol through structural
    typing - no explicit inheritance needed.

    Model calls are CPU-bound and run in a worker thread so they do not
    block the event loop.
    """

    def __init__(self, model_name: str | None = None) -> None:
        """Initialize the local embedding provider.

        Args:
            model_name: Name of the sentence-transformers model.
                       Defaults to settings.embedding_model.
        """
        self._model_name = model_name or settings.embedding_model
        self._model: SentenceTransformer | None = None
        self._dimension: int | None = None

    @classmethod
    def create(cls, model_name: str | None = None) -> "LocalEmbeddingProvider":
        """Factory method to create LocalEmbeddingProvider with defaults."""
        return cls(model_name=model_name)

    @property
    def model(self) -> SentenceTransformer:
        """Lazy-load the embedding model."""
        if self._model is None:
            logger.info("Loading embedding model: %s", self._model_name)
            start_time = time.time()
            self._model = SentenceTransformer(self._model_name)
            logger.info("Model loaded in %.2fs", time.time() - start_time)
        return self._model

    @property
    def dimension(self) -> int:
        """Get the embedding vector dimension."""
        if self._dimension is None:
            self._dimension = self.model.get_sentence_embedding_dimension()
        return self._dimension

    @property
    def model_name(self) -> str:
        """Get the model name/identifier."""
        return self._model_name

    def _encode_sync(self, texts: list[str], batch_size: int) -> list[list[float]]:
        embeddings = self.model.encode(
            texts,
            batch_size=batch_size,
            show_progress_bar=False,
            normalize_embeddings=True,
        )
        return np.asarray(embeddings, dtype=np.float64).tolist()

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text."""
        return (await self.encode_batch([text]))[0]

    async def encode_batch(self, texts: list[str], batch_size: int = 32) -> list[list[float]]:
        """Generate embeddings for multiple texts efficiently.

        Args:
            texts: List of texts to encode
            batch_size: Batch size for encoding

        Returns:
            List of embedding vectors
        """
        try:
            return await asyncio.to_thread(self._encode_sync, texts, batch_size)
        except Exception as e:
            raise EmbeddingError(f"Local embedding failed: {e}") from e

    async def is_available(self) -> bool:
        """Check if the model can be loaded."""
        try:
            await asyncio.to_thread(lambda: self.model)
            return True
        except Exception:
            return False
