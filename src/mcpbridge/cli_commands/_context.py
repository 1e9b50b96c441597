"""Settings and controller construction shared by the subcommands."""

from __future__ import annotations

import sys

import click

from mcpbridge.cli_commands._output import console
from mcpbridge.sdk.errors import SettingsValidationError
from mcpbridge.sdk.models import BridgeSettings
from mcpbridge.sdk.settings import SettingsLoader
from mcpbridge.sdk.store import ServerConfigStore


def load_settings(ctx: click.Context) -> BridgeSettings:
    """Load settings for the current invocation, exiting on invalid files."""
    obj = ctx.find_root().obj or {}
    cached = obj.get("settings")
    if cached is not None:
        return cached

    loader = SettingsLoader(obj.get("settings_path"))
    try:
        settings = loader.load()
    except SettingsValidationError as exc:
        console.print(f"[red]Invalid settings in {loader.path}:[/red] {exc}")
        sys.exit(1)

    if settings.telemetry.enabled:
        from mcpbridge.utils.telemetry import configure_telemetry

        configure_telemetry(
            console=settings.telemetry.console,
            otlp_endpoint=settings.telemetry.otlp_endpoint,
        )

    obj["settings"] = settings
    return settings


def open_store(ctx: click.Context) -> ServerConfigStore:
    return ServerConfigStore(load_settings(ctx).resolved_servers_path())
