"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from mcpbridge.cli_commands.chat import ask, chat
    from mcpbridge.cli_commands.servers import servers
    from mcpbridge.cli_commands.tools import tools

    cli.add_command(servers)
    cli.add_command(tools)
    cli.add_command(ask)
    cli.add_command(chat)
