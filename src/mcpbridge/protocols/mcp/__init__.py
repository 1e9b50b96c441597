"""MCP protocol — Model Context Protocol client."""

from mcpbridge.protocols.mcp.client import MCPClient, MCPConnector
from mcpbridge.protocols.mcp.models import (
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    RawToolDescriptor,
    ToolCallResult,
)
from mcpbridge.protocols.mcp.transport import (
    MCPTransport,
    StreamableHTTPTransport,
    WebSocketTransport,
    create_transport,
)

__all__ = [
    "JsonRpcError",
    "JsonRpcNotification",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MCPClient",
    "MCPConnector",
    "MCPTransport",
    "RawToolDescriptor",
    "StreamableHTTPTransport",
    "ToolCallResult",
    "WebSocketTransport",
    "create_transport",
]
