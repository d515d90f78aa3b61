"""OpenAI-compatible upstream client.

Forwards cache misses to the real LLM provider.
"""

from typing import Any

import httpx

from mimir.config import settings
from mimir.exceptions import UpstreamError


class OpenAIUpstreamClient:
    """httpx implementation of the ChatCompletionProvider protocol.

    Works with any API that speaks the OpenAI chat-completions format.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the upstream client.

        Args:
            base_url: API base URL, e.g. https://api.openai.com/v1. Defaults to settings.
            api_key: Bearer token. Defaults to settings.openai_api_key.
            timeout: Request timeout in seconds. Defaults to settings.
            client: Preconfigured HTTP client (mainly for tests).
        """
        self._base_url = (base_url or settings.upstream_base_url).rstrip("/")
        self._api_key = api_key if api_key is not None else settings.openai_api_key
        self._timeout = timeout or settings.upstream_timeout
        self._client = client

    @classmethod
    def create(cls, base_url: str | None = None, api_key: str | None = None) -> "OpenAIUpstreamClient":
        """Factory method to create OpenAIUpstreamClient with defaults."""
        return cls(base_url=base_url, api_key=api_key)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def create_chat_completion(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Send a chat-completion request upstream.

        Args:
            payload: OpenAI-compatible request body

        Returns:
            The decoded JSON response body

        Raises:
            UpstreamError: On a non-2xx reply (with its status) or a transport failure (502)
        """
        url = f"{self._base_url}/chat/completions"
        try:
            response = await self.client.post(url, json=payload, headers=self._headers())
        except httpx.HTTPError as e:
            raise UpstreamError(502, f"request failed: {e}") from e

        if response.status_code >= 400:
            raise UpstreamError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(502, f"invalid JSON from upstream: {e}") from e

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
