"""Tool registry — discovery across servers and function-name mapping."""

from mcpbridge.core.registry.discovery import DiscoveryCoordinator, build_declaration
from mcpbridge.core.registry.models import DiscoveryResult, Registry, ServerDescriptor, ToolMapping
from mcpbridge.core.registry.naming import derive_function_name, sanitize

__all__ = [
    "DiscoveryCoordinator",
    "DiscoveryResult",
    "Registry",
    "ServerDescriptor",
    "ToolMapping",
    "build_declaration",
    "derive_function_name",
    "sanitize",
]
