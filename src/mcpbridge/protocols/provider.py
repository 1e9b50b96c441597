"""Tool-provider protocols — the interface the bridge needs from a transport.

A connector opens one connection to one tool-provider server; the
connection lists tools, invokes one tool, and is closed.  Connections are
never pooled: discovery and every tool call open their own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from mcpbridge.protocols.mcp.models import RawToolDescriptor, ToolCallResult


@runtime_checkable
class ToolProviderConnection(Protocol):
    """An open connection to one tool-provider server."""

    async def list_tools(self) -> list[RawToolDescriptor]:
        """Return the provider's tools; ``[]`` when listing fails."""
        ...

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolCallResult:
        """Invoke *name*.

        Provider-level failures come back with ``is_error`` set; only
        transport failures raise.
        """
        ...

    async def close(self) -> None:
        """Close the connection.  Idempotent and never raises."""
        ...


@runtime_checkable
class ToolProviderConnector(Protocol):
    """Opens connections to tool-provider servers by URL."""

    async def connect(self, url: str) -> ToolProviderConnection:
        """Connect to *url*, raising ``ConnectionError`` on failure."""
        ...
