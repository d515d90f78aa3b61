"""Upstream chat-completion provider protocol."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ChatCompletionProvider(Protocol):
    """Protocol for the upstream LLM API that cache misses are forwarded to.

    Example:
        ```python
        upstream: ChatCompletionProvider = OpenAIUpstreamClient.create()
        body = await upstream.create_chat_completion({"model": "gpt-4o", "messages": [...]})
        ```
    """

    async def create_chat_completion(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Send a chat-completion request upstream.

        Args:
            payload: OpenAI-compatible request body

        Returns:
            The decoded JSON response body

        Raises:
            UpstreamError: On a non-2xx reply or a transport failure
        """
        ...
