"""Shared CLI output formatters."""

from __future__ import annotations

import json

from rich.console import Console
from rich.table import Table

from mcpbridge.core.registry.models import Registry, ServerDescriptor  # noqa: TC001
from mcpbridge.sdk.models import ChatMessage  # noqa: TC001

console = Console()

_ROLE_STYLES = {
    "user": "bold blue",
    "assistant": "bold green",
    "system": "yellow",
    "tool": "magenta",
}


def print_servers_table(servers: list[ServerDescriptor]) -> None:
    """Pretty-print the configured servers as a table."""
    table = Table(title="MCP Servers")
    table.add_column("Name", style="cyan")
    table.add_column("URL")
    table.add_column("Default", justify="center")

    for server in servers:
        table.add_row(server.name, server.url, "*" if server.is_default else "")

    console.print(table)


def print_tools_table(registry: Registry) -> None:
    """Pretty-print the discovered functions as a table."""
    table = Table(title="Discovered Tools")
    table.add_column("Function", style="cyan")
    table.add_column("Server")
    table.add_column("Tool")
    table.add_column("Description")

    for mapping in registry:
        table.add_row(
            mapping.name,
            mapping.server_name,
            mapping.provider_tool_name,
            _truncate(mapping.declaration.description),
        )

    console.print(table)


def print_tools_json(registry: Registry) -> None:
    console.print_json(json.dumps([d.to_openai_tool() for d in registry.declarations()]))


def print_message(message: ChatMessage) -> None:
    """Print one transcript entry, styled by role."""
    if message.role == "user":
        return
    style = "red" if message.is_error else _ROLE_STYLES[message.role]
    label = message.role.capitalize()
    console.print(f"[{style}]{label}:[/{style}] ", end="")
    console.print(message.content, markup=False, highlight=False)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
