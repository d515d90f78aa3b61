"""
Tests for the Ollama and OpenAI embedding providers and the upstream client,
using httpx mock transports.
"""

import asyncio
import json

import httpx
import pytest

from mimir.exceptions import EmbeddingError, UpstreamError
from mimir.protocols import ChatCompletionProvider, EmbeddingProvider
from mimir.repositories import OllamaEmbeddingProvider, OpenAIEmbeddingProvider, OpenAIUpstreamClient


def ollama_with(handler) -> OllamaEmbeddingProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OllamaEmbeddingProvider(model_name="all-minilm", base_url="http://ollama:11434", client=client)


def test_ollama_satisfies_protocol():
    assert isinstance(OllamaEmbeddingProvider(model_name="all-minilm"), EmbeddingProvider)


def test_ollama_dimensions():
    assert OllamaEmbeddingProvider(model_name="mxbai-embed-large").dimension == 1024
    assert OllamaEmbeddingProvider(model_name="all-minilm").dimension == 384
    assert OllamaEmbeddingProvider(model_name="something-new").dimension == 768


def test_ollama_encode():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"embeddings": [[0.1, 0.2, 0.3]]})

    provider = ollama_with(handler)
    assert asyncio.run(provider.encode("hello")) == [0.1, 0.2, 0.3]

    assert requests[0].url == "http://ollama:11434/api/embed"
    assert json.loads(requests[0].content) == {"model": "all-minilm", "input": "hello"}


def test_ollama_accepts_singular_embedding_field():
    provider = ollama_with(lambda request: httpx.Response(200, json={"embedding": [1, 2]}))
    assert asyncio.run(provider.encode("hello")) == [1.0, 2.0]


def test_ollama_empty_embedding_is_an_error():
    provider = ollama_with(lambda request: httpx.Response(200, json={"embedding": []}))
    with pytest.raises(EmbeddingError):
        asyncio.run(provider.encode("hello"))


def test_ollama_http_error():
    provider = ollama_with(lambda request: httpx.Response(404, json={"error": "model not found"}))
    with pytest.raises(EmbeddingError, match="ollama pull all-minilm"):
        asyncio.run(provider.encode("hello"))
    assert asyncio.run(provider.is_available()) is False


def test_ollama_encode_batch_reports_failing_index():
    def handler(request: httpx.Request) -> httpx.Response:
        if json.loads(request.content)["input"] == "bad":
            return httpx.Response(500, text="boom")
        return httpx.Response(200, json={"embeddings": [[1.0]]})

    provider = ollama_with(handler)
    assert asyncio.run(provider.encode_batch(["a", "b"])) == [[1.0], [1.0]]
    with pytest.raises(EmbeddingError, match="text 1"):
        asyncio.run(provider.encode_batch(["a", "bad"]))


def upstream_with(handler) -> OpenAIUpstreamClient:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenAIUpstreamClient(base_url="http://llm/v1", api_key="sk-test", timeout=5, client=client)


def test_upstream_satisfies_protocol():
    assert isinstance(OpenAIUpstreamClient(base_url="http://llm/v1"), ChatCompletionProvider)


def test_upstream_posts_with_bearer_auth():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "chatcmpl-1"})

    body = asyncio.run(upstream_with(handler).create_chat_completion({"model": "m", "messages": []}))

    assert body == {"id": "chatcmpl-1"}
    assert seen[0].url == "http://llm/v1/chat/completions"
    assert seen[0].headers["Authorization"] == "Bearer sk-test"


def test_upstream_error_status_is_kept():
    client = upstream_with(lambda request: httpx.Response(429, text="rate limited"))
    with pytest.raises(UpstreamError) as excinfo:
        asyncio.run(client.create_chat_completion({"model": "m"}))
    assert excinfo.value.status_code == 429
    assert excinfo.value.body == "rate limited"


def test_upstream_transport_failure_is_502():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamError) as excinfo:
        asyncio.run(upstream_with(handler).create_chat_completion({"model": "m"}))
    assert excinfo.value.status_code == 502


def openai_embedder_with(handler, **kwargs) -> OpenAIEmbeddingProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenAIEmbeddingProvider(
        model_name="text-embedding-3-small", base_url="http://llm/v1", api_key="sk-test", client=client, **kwargs
    )


def test_openai_embedder_satisfies_protocol():
    assert isinstance(OpenAIEmbeddingProvider(model_name="text-embedding-3-small"), EmbeddingProvider)


def test_openai_embedder_dimensions():
    assert OpenAIEmbeddingProvider(model_name="text-embedding-3-large").dimension == 3072
    assert OpenAIEmbeddingProvider(model_name="text-embedding-ada-002").dimension == 1536
    assert OpenAIEmbeddingProvider(model_name="text-embedding-3-large", dimensions=256).dimension == 256


def test_openai_embedder_batches_in_one_request_and_orders_by_index():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "object": "list",
                "data": [
                    {"object": "embedding", "index": 1, "embedding": [0.0, 1.0]},
                    {"object": "embedding", "index": 0, "embedding": [1.0, 0.0]},
                ],
                "model": "text-embedding-3-small",
                "usage": {"prompt_tokens": 4, "total_tokens": 4},
            },
        )

    vectors = asyncio.run(openai_embedder_with(handler).encode_batch(["first", "second"]))

    assert vectors == [[1.0, 0.0], [0.0, 1.0]]
    assert len(seen) == 1
    assert seen[0].url == "http://llm/v1/embeddings"
    assert seen[0].headers["Authorization"] == "Bearer sk-test"
    assert json.loads(seen[0].content) == {"model": "text-embedding-3-small", "input": ["first", "second"]}


def test_openai_embedder_sends_requested_dimensions():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"data": [{"index": 0, "embedding": [0.5, 0.5]}]})

    assert asyncio.run(openai_embedder_with(handler, dimensions=2).encode("hello")) == [0.5, 0.5]
    assert seen[0]["dimensions"] == 2


def test_openai_embedder_http_error():
    provider = openai_embedder_with(lambda request: httpx.Response(401, json={"error": {"message": "bad key"}}))
    with pytest.raises(EmbeddingError):
        asyncio.run(provider.encode("hello"))
    assert asyncio.run(provider.is_available()) is False


@pytest.mark.parametrize(
    "body",
    [
        {"data": []},
        {"data": [{"index": 0, "embedding": []}]},
        {"unexpected": True},
    ],
)
def test_openai_embedder_malformed_reply(body):
    provider = openai_embedder_with(lambda request: httpx.Response(200, json=body))
    with pytest.raises(EmbeddingError):
        asyncio.run(provider.encode("hello"))


def test_openai_embedder_empty_batch_makes_no_request():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assert asyncio.run(openai_embedder_with(handler).encode_batch([])) == []
