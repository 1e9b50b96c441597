"""mcpbridge CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from mcpbridge import __version__

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.version_option(version=__version__, prog_name="mcpbridge")
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    envvar="MCPBRIDGE_SETTINGS",
    help="Settings YAML file (default: $MCPBRIDGE_HOME/settings.yaml).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, settings_path: Path | None, verbose: bool) -> None:
    """mcpbridge — chat with an LLM that calls tools on MCP servers."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )
    ctx.ensure_object(dict)
    ctx.obj["settings_path"] = settings_path
    ctx.obj["verbose"] = verbose


# Register subcommands
from mcpbridge.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
