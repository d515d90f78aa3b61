"""Request DTOs for the OpenAI-compatible API.

Open fields are modelled as tagged variants: content parts are
discriminated by ``type``, and call controls are either a fixed mode
string or an object naming a specific function.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class TextContentPart(BaseModel):
    """Plain text part of a multimodal message."""

    type: Literal["text"] = "text"
    text: str


class ImageURL(BaseModel):
    url: str
    detail: str | None = None


class ImageContentPart(BaseModel):
    """Image part of a multimodal message."""

    type: Literal["image_url"] = "image_url"
    image_url: ImageURL


ContentPart = Annotated[TextContentPart | ImageContentPart, Field(discriminator="type")]


class FunctionCall(BaseModel):
    """A function call emitted by the model."""

    name: str
    arguments: str


class ToolCall(BaseModel):
    id: str
    type: Literal["function"] = "function"
    function: FunctionCall


class Message(BaseModel):
    """A chat message. ``content`` is plain text or a list of tagged parts."""

    model_config = ConfigDict(extra="allow")

    role: str
    content: str | list[ContentPart] | None = None
    name: str | None = None
    function_call: FunctionCall | None = None
    tool_calls: list[ToolCall] | None = None
    tool_call_id: str | None = None

    def text(self) -> str:
        """Text of the message, ignoring non-text parts."""
        if self.content is None:
            return ""
        if isinstance(self.content, str):
            return self.content
        return " ".join(part.text for part in self.content if isinstance(part, TextContentPart))


class Function(BaseModel):
    name: str
    description: str | None = None
    parameters: dict[str, Any] | None = None


class Tool(BaseModel):
    type: Literal["function"] = "function"
    function: Function


class FunctionName(BaseModel):
    name: str


class FunctionChoice(BaseModel):
    """Forces the model to call one named function."""

    type: Literal["function"] = "function"
    function: FunctionName


class ResponseFormat(BaseModel):
    type: str


class ChatCompletionRequest(BaseModel):
    """Request DTO for POST /v1/chat/completions.

    Unknown fields are kept and forwarded upstream untouched.
    """

    model_config = ConfigDict(extra="allow")

    model: str = Field(..., min_length=1)
    messages: list[Message] = Field(..., min_length=1)
    temperature: float | None = None
    top_p: float | None = None
    n: int | None = None
    stream: bool = False
    stop: str | list[str] | None = None
    max_tokens: int | None = None
    presence_penalty: float | None = None
    frequency_penalty: float | None = None
    user: str | None = None
    functions: list[Function] | None = None
    function_call: Literal["none", "auto"] | FunctionName | None = None
    tools: list[Tool] | None = None
    tool_choice: Literal["none", "auto", "required"] | FunctionChoice | None = None
    response_format: ResponseFormat | None = None
    seed: int | None = None

    def cache_text(self) -> str:
        """Text the cache embedding is computed from.

        The model name is included so different models never share entries,
        and a ``params:`` line is appended when any option that changes the
        shape or content of the reply is set.
        """
        lines = [f"model: {self.model}"]
        lines.extend(f"{message.role}: {message.text()}" for message in self.messages)
        params = self._params_summary()
        if params:
            lines.append(f"params: {params}")
        return "\n".join(lines)

    def _params_summary(self) -> str:
        params: dict[str, Any] = {
            "n": self.n,
            "temperature": self.temperature,
            "top_p": self.top_p,
            "max_tokens": self.max_tokens,
            "seed": self.seed,
            "stop": self.stop,
        }
        if self.response_format is not None:
            params["response_format"] = self.response_format.type
        if self.tools:
            params["tools"] = sorted(tool.function.name for tool in self.tools)
        if self.functions:
            params["functions"] = sorted(function.name for function in self.functions)
        if self.tool_choice is not None:
            params["tool_choice"] = (
                self.tool_choice
                if isinstance(self.tool_choice, str)
                else f"function:{self.tool_choice.function.name}"
            )
        if self.function_call is not None:
            params["function_call"] = (
                self.function_call if isinstance(self.function_call, str) else f"function:{self.function_call.name}"
            )
        return " ".join(f"{key}={value}" for key, value in params.items() if value is not None)

    def to_upstream(self) -> dict[str, Any]:
        """Serialize for forwarding, dropping unset optional fields."""
        return self.model_dump(exclude_none=True)
