"""``mcpbridge tools`` — discover the functions exposed by configured servers."""

from __future__ import annotations

import asyncio

import click

from mcpbridge.cli_commands._context import load_settings
from mcpbridge.cli_commands._output import console, print_tools_json, print_tools_table


@click.group()
def tools() -> None:
    """Discover and inspect tools."""


@tools.command("list")
@click.option("--json", "as_json", is_flag=True, help="Print the LLM-facing tool schemas.")
@click.pass_context
def list_cmd(ctx: click.Context, as_json: bool) -> None:
    """Run discovery against every configured server and list the results."""
    from mcpbridge.sdk.chat import ChatController

    controller = ChatController(load_settings(ctx))
    if not controller.list_servers():
        console.print("[yellow]No servers configured.[/yellow]")
        return

    try:
        registry = asyncio.run(controller.rediscover_tools())
    except Exception as exc:
        console.print(f"[red]Discovery error:[/red] {exc}")
        return

    if not registry:
        console.print("[yellow]No tools discovered.[/yellow]")
        return

    if as_json:
        print_tools_json(registry)
    else:
        print_tools_table(registry)
