"""``mcpbridge servers`` — manage the configured MCP servers."""

from __future__ import annotations

import sys

import click

from mcpbridge.cli_commands._context import open_store
from mcpbridge.cli_commands._output import console, print_servers_table
from mcpbridge.sdk.store import StoreResult  # noqa: TC001


@click.group()
def servers() -> None:
    """Add, remove, and list MCP servers."""


@servers.command("add")
@click.argument("name")
@click.argument("url")
@click.pass_context
def add(ctx: click.Context, name: str, url: str) -> None:
    """Add server NAME reachable at URL (http, https, ws or wss)."""
    _report(open_store(ctx).add_server(name, url))


@servers.command("remove")
@click.argument("name")
@click.pass_context
def remove(ctx: click.Context, name: str) -> None:
    """Remove server NAME."""
    _report(open_store(ctx).remove_server(name))


@servers.command("default")
@click.argument("name")
@click.pass_context
def default(ctx: click.Context, name: str) -> None:
    """Make NAME the default server."""
    _report(open_store(ctx).set_default_server(name))


@servers.command("list")
@click.pass_context
def list_cmd(ctx: click.Context) -> None:
    """List configured servers."""
    configured = open_store(ctx).list_servers()
    if not configured:
        console.print("[yellow]No servers configured.[/yellow]")
        return
    print_servers_table(configured)


def _report(result: StoreResult) -> None:
    if result.success:
        console.print(f"[green]{result.message}[/green]")
        return
    console.print(f"[red]{result.message}[/red]")
    sys.exit(1)
