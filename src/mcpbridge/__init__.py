"""mcpbridge — chat with an LLM that calls tools on remote MCP servers."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from mcpbridge.sdk.chat import ChatController as ChatController
    from mcpbridge.sdk.models import BridgeSettings as BridgeSettings

_SDK_EXPORTS = {
    "ChatController": "mcpbridge.sdk.chat",
    "BridgeSettings": "mcpbridge.sdk.models",
}


def __getattr__(name: str) -> object:
    module_path = _SDK_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'mcpbridge' has no attribute {name!r}")
