"""Canonical message schema — the provider-neutral conversation format.

The LLM session stores history in this form and renders it for the
provider on every request, so orchestration code never touches a
provider-specific payload.
"""

from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Content Parts: multimodal content building blocks
# ---------------------------------------------------------------------------


class TextContent(BaseModel):
    """Plain text content part."""

    type: Literal["text"] = "text"
    text: str


class ImageContent(BaseModel):
    """Image content part (URL or inline base64)."""

    type: Literal["image"] = "image"
    url: str | None = None
    data: str | None = None
    media_type: str | None = None


class AudioContent(BaseModel):
    """Audio content part (URL or inline base64)."""

    type: Literal["audio"] = "audio"
    url: str | None = None
    data: str | None = None
    media_type: str | None = None


class FileContent(BaseModel):
    """Any other inline file (PDF, archives, ...), base64 encoded."""

    type: Literal["file"] = "file"
    data: str
    media_type: str = "application/octet-stream"
    filename: str | None = None


ContentPart = TextContent | ImageContent | AudioContent | FileContent


# ---------------------------------------------------------------------------
# Function calling: requested calls and their results
# ---------------------------------------------------------------------------


class ToolCall(BaseModel):
    """A function invocation requested by the model."""

    id: str = Field(default_factory=lambda: uuid4().hex[:12])
    name: str
    arguments: dict[str, Any] = {}


class FunctionResult(BaseModel):
    """The structured result fed back to the model for one :class:`ToolCall`.

    ``name`` is the function name the model requested; ``response`` is either
    the tool's result payload or ``{"error": ...}``.
    """

    call_id: str
    name: str
    response: dict[str, Any]

    @classmethod
    def error(cls, call: ToolCall, message: str) -> "FunctionResult":
        return cls(call_id=call.id, name=call.name, response={"error": message})

    @property
    def is_error(self) -> bool:
        return "error" in self.response or bool(self.response.get("isError"))


# ---------------------------------------------------------------------------
# Canonical Message: the core message type
# ---------------------------------------------------------------------------


class CanonicalMessage(BaseModel):
    """A single message in the canonical format.

    Roles:
    - system: instruction/context messages
    - user: human input
    - assistant: model output (may include tool_calls)
    - tool: one function result (must include tool_call_id)
    """

    role: Literal["system", "user", "assistant", "tool"]
    content: list[ContentPart] = []
    tool_calls: list[ToolCall] | None = None
    tool_call_id: str | None = None
    name: str | None = None
    metadata: dict[str, Any] = {}

    @property
    def text(self) -> str:
        """Extract concatenated text from all TextContent parts."""
        return "".join(part.text for part in self.content if isinstance(part, TextContent))

    @classmethod
    def system(cls, text: str, **metadata: Any) -> "CanonicalMessage":
        """Create a system message."""
        parts: list[ContentPart] = [TextContent(text=text)]
        return cls(role="system", content=parts, metadata=metadata)

    @classmethod
    def user(cls, content: "str | list[ContentPart]", **metadata: Any) -> "CanonicalMessage":
        """Create a user message from text or a list of parts."""
        parts: list[ContentPart] = (
            [TextContent(text=content)] if isinstance(content, str) else list(content)
        )
        return cls(role="user", content=parts, metadata=metadata)

    @classmethod
    def assistant(
        cls,
        text: str = "",
        tool_calls: list[ToolCall] | None = None,
        **metadata: Any,
    ) -> "CanonicalMessage":
        """Create an assistant message."""
        content: list[ContentPart] = [TextContent(text=text)] if text else []
        return cls(role="assistant", content=content, tool_calls=tool_calls, metadata=metadata)

    @classmethod
    def tool(cls, result: FunctionResult, text: str, **metadata: Any) -> "CanonicalMessage":
        """Create a tool-result message; *text* is the serialized payload."""
        return cls(
            role="tool",
            content=[TextContent(text=text)],
            tool_call_id=result.call_id,
            name=result.name,
            metadata=metadata,
        )


# ---------------------------------------------------------------------------
# Conversation History: ordered container of messages
# ---------------------------------------------------------------------------


class ConversationHistory(BaseModel):
    """An ordered sequence of canonical messages forming a conversation."""

    messages: list[CanonicalMessage] = []

    def append(self, message: CanonicalMessage) -> None:
        """Append a message to the history."""
        self.messages.append(message)

    def clear(self) -> None:
        self.messages.clear()

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self):  # type: ignore[override]
        return iter(self.messages)


# ---------------------------------------------------------------------------
# LLM responses
# ---------------------------------------------------------------------------


class LlmResponse(BaseModel):
    """What one ``send`` to the model produced."""

    text: str | None = None
    function_calls: list[ToolCall] = []
    block_reason: str | None = None
    block_message: str | None = None
    finish_reason: str | None = None
    metadata: dict[str, Any] = {}


TurnContent = str | list[ContentPart] | list[FunctionResult]
