"""MCP models — JSON-RPC 2.0 messages and tool definitions.

Implements the message format used by the Model Context Protocol for
tool discovery (``tools/list``) and execution (``tools/call``).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

PROTOCOL_VERSION = "2025-03-26"

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message."""

    jsonrpc: str = "2.0"
    method: str
    id: int | str = 1
    params: dict[str, Any] = {}


class JsonRpcNotification(BaseModel):
    """A JSON-RPC 2.0 notification (no ``id``, no response expected)."""

    jsonrpc: str = "2.0"
    method: str
    params: dict[str, Any] = {}


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message."""

    jsonrpc: str = "2.0"
    id: int | str | None = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class ToolAnnotations(BaseModel):
    """Optional hints a provider attaches to a tool."""

    model_config = {"extra": "allow"}

    title: str | None = None


class RawToolDescriptor(BaseModel):
    """A tool definition as returned by ``tools/list``.

    ``input_schema`` is kept exactly as the provider sent it; it may be a
    boolean schema, which the discovery layer rejects.
    """

    model_config = {"populate_by_name": True}

    name: str
    description: str | None = None
    input_schema: bool | dict[str, Any] = Field(default_factory=dict, alias="inputSchema")
    annotations: ToolAnnotations | None = None


class ToolCallResult(BaseModel):
    """The result of ``tools/call``.

    Provider-level failures are reported with ``is_error`` rather than
    raised, so the model can see them.
    """

    model_config = {"populate_by_name": True}

    content: list[dict[str, Any]] = []
    is_error: bool = Field(default=False, alias="isError")
    structured_content: dict[str, Any] | None = Field(default=None, alias="structuredContent")

    @classmethod
    def from_error(cls, text: str) -> ToolCallResult:
        """Build an error result carrying a single text block."""
        return cls(content=[{"type": "text", "text": text}], is_error=True)

    @property
    def text(self) -> str:
        """Concatenated text blocks of the result."""
        return "\n".join(str(c.get("text", "")) for c in self.content if c.get("type") == "text")

    def to_payload(self) -> dict[str, Any]:
        """Dump in MCP wire form (camelCase keys, unset fields omitted)."""
        return self.model_dump(by_alias=True, exclude_none=True)
