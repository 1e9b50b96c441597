"""Shared error types for the protocol layer."""


class ProtocolError(Exception):
    """Base error for all protocol-layer failures."""


class ConnectionError(ProtocolError):
    """Failed to connect to a tool-provider server."""


class TransportError(ProtocolError):
    """The connection to a tool-provider server broke mid-request."""


class ToolNotFoundError(ProtocolError):
    """Requested function is not present in the current registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Function {name} is not implemented or mapped.")


class ToolExecutionError(ProtocolError):
    """A tool invocation failed before a result could be produced."""

    def __init__(self, name: str, detail: str = "") -> None:
        self.name = name
        self.detail = detail
        super().__init__(f"Error executing MCP tool {name}" + (f": {detail}" if detail else ""))
