"""``mcpbridge ask`` and ``mcpbridge chat`` — talk to the model."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from mcpbridge.cli_commands._context import load_settings
from mcpbridge.cli_commands._output import console, print_message, print_tools_table
from mcpbridge.core.orchestration.events import EventKind

EXIT_COMMANDS = frozenset({"/exit", "/quit"})


@click.command()
@click.argument("message")
@click.option(
    "--attach",
    "-a",
    "attachments",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Attach a file to the message (repeatable).",
)
@click.pass_context
def ask(ctx: click.Context, message: str, attachments: tuple[Path, ...]) -> None:
    """Send a single MESSAGE and print the reply."""
    from mcpbridge.sdk.chat import ChatController

    controller = ChatController(load_settings(ctx))
    controller.on(EventKind.MESSAGE, print_message)

    async def _ask() -> bool:
        await controller.rediscover_tools()
        outcome = await controller.send_message(message, attachments)
        return outcome.is_error

    if asyncio.run(_ask()):
        sys.exit(1)


@click.command()
@click.pass_context
def chat(ctx: click.Context) -> None:
    """Start an interactive chat session.

    Type /tools to list discovered tools and /exit to leave.
    """
    from mcpbridge.sdk.chat import ChatController

    settings = load_settings(ctx)
    controller = ChatController(settings)
    controller.on(EventKind.MESSAGE, print_message)

    async def _repl() -> None:
        registry = await controller.rediscover_tools()
        console.print(f"Using {settings.model.model} with {len(registry)} tool(s).")
        console.print("Type /tools to list them, /exit to quit.")
        while True:
            try:
                line = click.prompt("You", prompt_suffix="> ")
            except (click.Abort, EOFError):
                console.print()
                return
            text = line.strip()
            if not text:
                continue
            if text in EXIT_COMMANDS:
                return
            if text == "/tools":
                print_tools_table(controller.registry)
                continue
            await controller.send_message(text)

    asyncio.run(_repl())
