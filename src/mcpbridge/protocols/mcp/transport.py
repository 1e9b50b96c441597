"""MCP transports — streamable HTTP and websocket communication layers.

Each transport satisfies the :class:`MCPTransport` protocol, providing
``connect``, ``send``, ``receive``, and ``close`` methods.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from typing import Any, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)

SESSION_HEADER = "Mcp-Session-Id"


@runtime_checkable
class MCPTransport(Protocol):
    """Abstract transport for MCP JSON-RPC communication."""

    async def connect(self) -> None: ...
    async def send(self, data: dict[str, Any]) -> None: ...
    async def receive(self) -> dict[str, Any]: ...
    async def close(self) -> None: ...


class StreamableHTTPTransport:
    """Communicates with an MCP server over the streamable HTTP transport.

    Every outgoing message is a POST to the endpoint.  The server answers
    either with a JSON body or with a ``text/event-stream`` carrying one or
    more messages; both are queued for :meth:`receive`.  Notifications are
    acknowledged with ``202`` and no body.
    """

    def __init__(self, url: str, timeout: float | None = None) -> None:
        self._url = url
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None
        self._session_id: str | None = None
        self._inbox: deque[dict[str, Any]] = deque()

    @property
    def session_id(self) -> str | None:
        return self._session_id

    async def connect(self) -> None:
        """Open the HTTP client.  The MCP session starts with ``initialize``."""
        self._client = httpx.AsyncClient(timeout=self._timeout)

    async def send(self, data: dict[str, Any]) -> None:
        """POST a JSON-RPC message and queue whatever the server answers."""
        if self._client is None:
            msg = "Transport not connected"
            raise RuntimeError(msg)
        headers = {
            "Accept": "application/json, text/event-stream",
            "Content-Type": "application/json",
        }
        if self._session_id:
            headers[SESSION_HEADER] = self._session_id

        response = await self._client.post(self._url, json=data, headers=headers)
        response.raise_for_status()

        session_id = response.headers.get(SESSION_HEADER)
        if session_id:
            self._session_id = session_id

        if response.status_code == 202 or not response.content:
            return

        content_type = response.headers.get("content-type", "")
        if content_type.startswith("text/event-stream"):
            for message in parse_event_stream(response.text):
                self._inbox.append(message)
            return

        body: Any = response.json()
        if isinstance(body, list):
            self._inbox.extend(item for item in body if isinstance(item, dict))
        elif isinstance(body, dict):
            self._inbox.append(body)

    async def receive(self) -> dict[str, Any]:
        """Pop the next queued server message."""
        if self._client is None:
            msg = "Transport not connected"
            raise RuntimeError(msg)
        if not self._inbox:
            msg = "No response received from server"
            raise RuntimeError(msg)
        return self._inbox.popleft()

    async def close(self) -> None:
        """Terminate the MCP session (best effort) and close the HTTP client."""
        if self._client is None:
            return
        client, self._client = self._client, None
        try:
            if self._session_id:
                await client.delete(self._url, headers={SESSION_HEADER: self._session_id})
        except httpx.HTTPError as exc:
            logger.debug("Could not terminate MCP session at %s: %s", self._url, exc)
        finally:
            self._session_id = None
            self._inbox.clear()
            await client.aclose()


class WebSocketTransport:
    """Communicates with an MCP server over WebSocket.

    Requires the ``websockets`` package (optional dependency ``ws``).
    """

    def __init__(self, url: str) -> None:
        self._url = url
        self._ws: Any = None  # websockets client connection

    async def connect(self) -> None:
        """Open the WebSocket connection."""
        try:
            import websockets
        except ImportError as exc:
            msg = "websockets package required — install with: pip install mcpbridge[ws]"
            raise ImportError(msg) from exc
        self._ws = await websockets.connect(self._url, subprotocols=["mcp"])

    async def send(self, data: dict[str, Any]) -> None:
        """Send a JSON message over the WebSocket."""
        if self._ws is None:
            msg = "Transport not connected"
            raise RuntimeError(msg)
        await self._ws.send(json.dumps(data))

    async def receive(self) -> dict[str, Any]:
        """Receive a JSON message from the WebSocket."""
        if self._ws is None:
            msg = "Transport not connected"
            raise RuntimeError(msg)
        raw = await self._ws.recv()
        return json.loads(raw)  # type: ignore[no-any-return]

    async def close(self) -> None:
        """Close the WebSocket connection."""
        if self._ws is not None:
            ws, self._ws = self._ws, None
            await ws.close()


def parse_event_stream(text: str) -> list[dict[str, Any]]:
    """Extract the JSON payloads of ``message`` events from an SSE body."""
    messages: list[dict[str, Any]] = []
    data_lines: list[str] = []
    event = "message"

    def flush() -> None:
        if data_lines and event == "message":
            payload = json.loads("\n".join(data_lines))
            if isinstance(payload, dict):
                messages.append(payload)
        data_lines.clear()

    for line in text.splitlines():
        if not line:
            flush()
            event = "message"
        elif line.startswith(":"):
            continue
        elif line.startswith("event:"):
            event = line[6:].strip()
        elif line.startswith("data:"):
            data_lines.append(line[5:].lstrip())
    flush()
    return messages


def create_transport(url: str, timeout: float | None = None) -> MCPTransport:
    """Pick a transport from the URL scheme."""
    scheme = httpx.URL(url).scheme
    if scheme in ("ws", "wss"):
        return WebSocketTransport(url)
    if scheme in ("http", "https"):
        return StreamableHTTPTransport(url, timeout=timeout)
    msg = f"Unsupported MCP server URL scheme: {scheme or '(none)'}"
    raise ValueError(msg)
