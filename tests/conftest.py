"""Shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def bridge_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point MCPBRIDGE_HOME at a temporary directory for every test."""
    home = tmp_path / "home"
    monkeypatch.setenv("MCPBRIDGE_HOME", str(home))
    return home
