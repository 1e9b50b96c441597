"""Tests for ``mcpbridge servers`` CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from click.testing import CliRunner

if TYPE_CHECKING:
    from pathlib import Path

from mcpbridge.cli import main
from mcpbridge.sdk.store import ServerConfigStore


class TestServersCommands:
    def test_add_and_list(self, bridge_home: Path) -> None:
        runner = CliRunner()

        result = runner.invoke(main, ["servers", "add", "docs", "http://localhost:8080/mcp"])
        assert result.exit_code == 0
        assert 'Server "docs"' in result.output

        result = runner.invoke(main, ["servers", "list"])
        assert result.exit_code == 0
        assert "docs" in result.output
        assert "http://localhost:8080/mcp" in result.output

        store = ServerConfigStore(bridge_home / "servers.yaml")
        assert [s.name for s in store.list_servers()] == ["docs"]

    def test_list_empty(self) -> None:
        result = CliRunner().invoke(main, ["servers", "list"])
        assert result.exit_code == 0
        assert "No servers configured" in result.output

    def test_add_invalid_url(self) -> None:
        result = CliRunner().invoke(main, ["servers", "add", "docs", "not-a-url"])
        assert result.exit_code == 1
        assert "Invalid URL format" in result.output

    def test_remove_and_default(self, bridge_home: Path) -> None:
        store = ServerConfigStore(bridge_home / "servers.yaml")
        store.add_server("a", "http://a.test/mcp")
        store.add_server("b", "http://b.test/mcp")
        runner = CliRunner()

        result = runner.invoke(main, ["servers", "default", "b"])
        assert result.exit_code == 0
        default = store.get_default_server()
        assert default is not None
        assert default.name == "b"

        result = runner.invoke(main, ["servers", "remove", "b"])
        assert result.exit_code == 0
        assert 'New default set to "a"' in result.output

    def test_remove_missing(self) -> None:
        result = CliRunner().invoke(main, ["servers", "remove", "ghost"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_settings_option(self, tmp_path: Path) -> None:
        servers_path = tmp_path / "elsewhere.yaml"
        settings = tmp_path / "settings.yaml"
        settings.write_text(f"servers_path: {servers_path}\n")

        result = CliRunner().invoke(
            main, ["--settings", str(settings), "servers", "add", "docs", "ws://localhost:9000"]
        )

        assert result.exit_code == 0
        assert servers_path.exists()

    def test_invalid_settings(self, tmp_path: Path) -> None:
        settings = tmp_path / "settings.yaml"
        settings.write_text("max_attempts: 0\n")
        result = CliRunner().invoke(main, ["--settings", str(settings), "servers", "list"])
        assert result.exit_code == 1
        assert "Invalid settings" in result.output
