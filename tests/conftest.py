"""
Shared fixtures and fakes for the mimir test suite.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from mimir.entities import CacheEntryEntity
from mimir.exceptions import EmbeddingError, UpstreamError

START = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FakeEmbedder:
    """Maps texts to fixed vectors by keyword."""

    def __init__(self, vectors: dict[str, list[float]] | None = None, fail: bool = False) -> None:
        self.vectors = vectors or {}
        self.fail = fail
        self.calls: list[str] = []

    @property
    def dimension(self) -> int:
        return 3

    @property
    def model_name(self) -> str:
        return "fake-embedder"

    async def encode(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.fail:
            raise EmbeddingError("embedder offline")
        for keyword, vector in self.vectors.items():
            if keyword in text:
                return vector
        return [0.0, 0.0, 1.0]

    async def encode_batch(self, texts: list[str]) -> list[list[float]]:
        return [await self.encode(t) for t in texts]

    async def is_available(self) -> bool:
        return not self.fail


class FakeUpstream:
    """Returns a canned chat completion and records payloads."""

    def __init__(self, error: UpstreamError | None = None) -> None:
        self.error = error
        self.payloads: list[dict[str, Any]] = []

    async def create_chat_completion(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return {
            "id": f"chatcmpl-{len(self.payloads)}",
            "object": "chat.completion",
            "created": 1767268800,
            "model": payload["model"],
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": f"answer {len(self.payloads)}"},
                    "finish_reason": "stop",
                }
            ],
            "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
        }


def make_entry(
    embedding: list[float],
    created_at: datetime = START,
    ttl: timedelta = timedelta(hours=1),
    response: Any = "response",
) -> CacheEntryEntity:
    """Build a fresh entry for tests."""
    return CacheEntryEntity.create(
        request={"embedding": embedding},
        response=response,
        embedding=embedding,
        created_at=created_at,
        ttl=ttl,
    )


@pytest.fixture
def clock() -> FakeClock:
    """Create a manually advanced clock."""
    return FakeClock()
