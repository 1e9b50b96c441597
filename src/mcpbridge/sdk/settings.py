"""Settings loading for the mcpbridge SDK and CLI."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from mcpbridge.sdk.errors import SettingsValidationError
from mcpbridge.sdk.models import BridgeSettings, default_home


class SettingsLoader:
    """Load and validate a settings YAML file into :class:`BridgeSettings`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or default_home() / "settings.yaml"

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> BridgeSettings:
        """Read YAML, interpolate env vars, and validate.

        A missing file yields default settings.  Environment variables in the
        form ``${VAR}`` or ``$VAR`` are expanded before YAML parsing, so API
        keys can stay out of the file.

        Raises:
            SettingsValidationError: On YAML parse errors or schema validation failures.
        """
        if not self._path.exists():
            return BridgeSettings()

        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SettingsValidationError(f"Cannot read {self._path}: {exc}", self._path) from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise SettingsValidationError(f"YAML parse error: {exc}", self._path) from exc

        if data is None:
            return BridgeSettings()
        if not isinstance(data, dict):
            raise SettingsValidationError("Settings YAML must be a mapping", self._path)

        try:
            return BridgeSettings.model_validate(data)
        except ValidationError as exc:
            raise SettingsValidationError(str(exc), self._path) from exc
