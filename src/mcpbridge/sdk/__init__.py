"""mcpbridge SDK — programmatic interface for chatting with MCP tools."""

from mcpbridge.sdk.chat import ChatController
from mcpbridge.sdk.errors import SettingsValidationError
from mcpbridge.sdk.models import BridgeSettings, ChatMessage, TelemetrySettings, ToolCallInfo
from mcpbridge.sdk.settings import SettingsLoader
from mcpbridge.sdk.store import ServerConfigStore, StoreResult

__all__ = [
    "BridgeSettings",
    "ChatController",
    "ChatMessage",
    "ServerConfigStore",
    "SettingsLoader",
    "SettingsValidationError",
    "StoreResult",
    "TelemetrySettings",
    "ToolCallInfo",
]
