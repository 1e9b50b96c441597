"""Tests for SettingsLoader."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path

from mcpbridge.core.interface.config import DEFAULT_MODEL
from mcpbridge.sdk.errors import SettingsValidationError
from mcpbridge.sdk.models import BridgeSettings
from mcpbridge.sdk.settings import SettingsLoader

_VALID_YAML = """\
model:
  model: openai/gpt-4o
  api_key: test-key
  temperature: 0.2
max_attempts: 3
network_timeout: 15
telemetry:
  enabled: true
"""


class TestSettingsLoader:
    def test_load_valid(self, tmp_path: Path) -> None:
        f = tmp_path / "settings.yaml"
        f.write_text(_VALID_YAML)
        settings = SettingsLoader(f).load()
        assert settings.model.model == "openai/gpt-4o"
        assert settings.model.temperature == 0.2
        assert settings.max_attempts == 3
        assert settings.network_timeout == 15
        assert settings.telemetry.enabled

    def test_env_var_interpolation(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_KEY", "secret-123")
        f = tmp_path / "settings.yaml"
        f.write_text(_VALID_YAML.replace("test-key", "${MY_KEY}"))
        assert SettingsLoader(f).load().model.api_key == "secret-123"

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        settings = SettingsLoader(tmp_path / "missing.yaml").load()
        assert settings == BridgeSettings()
        assert settings.model.model == DEFAULT_MODEL
        assert settings.max_attempts == 5

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        f = tmp_path / "settings.yaml"
        f.write_text("")
        assert SettingsLoader(f).load() == BridgeSettings()

    def test_default_path_uses_home(self, bridge_home: Path) -> None:
        assert SettingsLoader().path == bridge_home / "settings.yaml"

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        f = tmp_path / "bad.yaml"
        f.write_text("{{{{invalid")
        with pytest.raises(SettingsValidationError, match="YAML parse error") as exc_info:
            SettingsLoader(f).load()
        assert exc_info.value.path == f

    def test_yaml_not_mapping(self, tmp_path: Path) -> None:
        f = tmp_path / "list.yaml"
        f.write_text("- item1\n- item2\n")
        with pytest.raises(SettingsValidationError, match="mapping"):
            SettingsLoader(f).load()

    def test_invalid_values(self, tmp_path: Path) -> None:
        f = tmp_path / "settings.yaml"
        f.write_text("max_attempts: 0\n")
        with pytest.raises(SettingsValidationError, match="max_attempts"):
            SettingsLoader(f).load()


class TestBridgeSettings:
    def test_servers_path_default(self, bridge_home: Path) -> None:
        assert BridgeSettings().resolved_servers_path() == bridge_home / "servers.yaml"

    def test_servers_path_override(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.yaml"
        assert BridgeSettings(servers_path=path).resolved_servers_path() == path
