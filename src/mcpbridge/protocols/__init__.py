"""Protocol layer — tool-provider connections (MCP)."""

from mcpbridge.protocols.errors import (
    ConnectionError,
    ProtocolError,
    ToolExecutionError,
    ToolNotFoundError,
    TransportError,
)
from mcpbridge.protocols.provider import ToolProviderConnection, ToolProviderConnector

__all__ = [
    "ConnectionError",
    "ProtocolError",
    "ToolExecutionError",
    "ToolNotFoundError",
    "ToolProviderConnection",
    "ToolProviderConnector",
    "TransportError",
]
