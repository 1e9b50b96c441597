"""MCPClient — connects to an MCP server and exposes its tools.

Implements tool discovery (``tools/list``) and execution (``tools/call``)
over an :class:`MCPTransport`.
"""

from __future__ import annotations

import logging
from typing import Any, cast

from pydantic import ValidationError

from mcpbridge import __version__
from mcpbridge.protocols.errors import ConnectionError, TransportError
from mcpbridge.protocols.mcp.models import (
    PROTOCOL_VERSION,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    RawToolDescriptor,
    ToolCallResult,
)
from mcpbridge.protocols.mcp.transport import MCPTransport, create_transport

logger = logging.getLogger(__name__)

CLIENT_NAME = "mcpbridge"

# Guards against servers that keep returning the same cursor.
_MAX_LIST_PAGES = 50


class MCPClient:
    """Async context manager that connects to an MCP server.

    Satisfies the :class:`~mcpbridge.protocols.provider.ToolProviderConnection`
    protocol.

    Usage::

        async with MCPClient("http://localhost:8080/mcp") as client:
            tools = await client.list_tools()
            result = await client.call_tool("read_file", {"path": "/tmp/x"})
    """

    def __init__(self, url: str, *, timeout: float | None = None) -> None:
        self._url = url
        self._timeout = timeout
        self._transport: MCPTransport | None = None
        self._next_id = 1

    @property
    def url(self) -> str:
        return self._url

    @property
    def connected(self) -> bool:
        return self._transport is not None

    async def __aenter__(self) -> MCPClient:
        await self.connect()
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    async def connect(self) -> None:
        """Create the transport, connect, and perform the initialize handshake."""
        if self._transport is not None:
            logger.warning("Already connected to %s; reconnecting", self._url)
            await self.close()
        try:
            self._transport = self._create_transport()
            await self._transport.connect()
            await self._handshake()
        except Exception as exc:
            await self.close()
            raise ConnectionError(f"Could not connect to {self._url}: {exc}") from exc
        except BaseException:
            # Cancelled mid-handshake (e.g. a timeout); the caller never gets the client.
            await self.close()
            raise
        logger.debug("Connected to MCP server %s", self._url)

    async def close(self) -> None:
        """Close the underlying transport.  Safe to call repeatedly."""
        if self._transport is None:
            return
        transport, self._transport = self._transport, None
        try:
            await transport.close()
        except Exception:
            logger.warning("Error while closing connection to %s", self._url, exc_info=True)

    async def list_tools(self) -> list[RawToolDescriptor]:
        """Send ``tools/list`` (following ``nextCursor``) and parse the results.

        Listing failures are logged and reported as an empty list.
        """
        tools: list[RawToolDescriptor] = []
        cursor: str | None = None
        try:
            for _ in range(_MAX_LIST_PAGES):
                params = {"cursor": cursor} if cursor else None
                response = await self._send_request("tools/list", params)
                if response.error is not None:
                    logger.warning(
                        "tools/list failed on %s: %s", self._url, response.error.message
                    )
                    return []
                result = response.result or {}
                raw_tools = cast("list[Any]", result.get("tools") or [])
                for raw in raw_tools:
                    try:
                        tools.append(RawToolDescriptor.model_validate(raw))
                    except ValidationError as exc:
                        logger.warning("Ignoring malformed tool from %s: %s", self._url, exc)
                cursor = result.get("nextCursor")
                if not cursor:
                    break
        except Exception:
            logger.warning("Error listing tools from %s", self._url, exc_info=True)
            return []
        return tools

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolCallResult:
        """Send ``tools/call`` for the named tool.

        JSON-RPC errors are returned as an error result; a broken
        connection raises :class:`TransportError`.
        """
        logger.info("Calling MCP tool %r on %s", name, self._url)
        try:
            response = await self._send_request(
                "tools/call",
                params={"name": name, "arguments": arguments},
            )
        except Exception as exc:
            raise TransportError(f"Error calling MCP tool {name}: {exc}") from exc

        if response.error is not None:
            return ToolCallResult.from_error(
                f"Error calling MCP tool {name}: {response.error.message}"
            )
        try:
            return ToolCallResult.model_validate(response.result or {})
        except ValidationError as exc:
            return ToolCallResult.from_error(f"Malformed result from MCP tool {name}: {exc}")

    def _create_transport(self) -> MCPTransport:
        """Build the appropriate transport from the server URL."""
        return create_transport(self._url, timeout=self._timeout)

    async def _handshake(self) -> None:
        """Perform the MCP initialize handshake."""
        response = await self._send_request(
            "initialize",
            params={
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {},
                "clientInfo": {"name": CLIENT_NAME, "version": __version__},
            },
        )
        if response.error is not None:
            msg = f"initialize rejected: {response.error.message}"
            raise RuntimeError(msg)
        await self._send_notification("notifications/initialized")

    async def _send_notification(self, method: str) -> None:
        if self._transport is None:
            msg = "Client not connected"
            raise RuntimeError(msg)
        await self._transport.send(JsonRpcNotification(method=method).model_dump())

    async def _send_request(
        self,
        method: str,
        params: dict[str, Any] | None = None,
    ) -> JsonRpcResponse:
        """Send a JSON-RPC request and wait for the matching response.

        Server-initiated messages that do not answer this request are skipped.
        """
        if self._transport is None:
            msg = "Client not connected"
            raise RuntimeError(msg)

        request_id = self._next_id
        self._next_id += 1

        request = JsonRpcRequest(
            method=method,
            id=request_id,
            params=params or {},
        )
        await self._transport.send(request.model_dump())
        while True:
            raw = await self._transport.receive()
            if raw.get("id") != request_id or "method" in raw:
                logger.debug("Skipping unrelated message from %s: %s", self._url, raw)
                continue
            return JsonRpcResponse.model_validate(raw)


class MCPConnector:
    """Opens :class:`MCPClient` connections.

    Satisfies the :class:`~mcpbridge.protocols.provider.ToolProviderConnector`
    protocol.
    """

    def __init__(self, *, timeout: float | None = None) -> None:
        self._timeout = timeout

    async def connect(self, url: str) -> MCPClient:
        client = MCPClient(url, timeout=self._timeout)
        await client.connect()
        return client
