"""Tests for SDK models."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

if TYPE_CHECKING:
    from pathlib import Path

from mcpbridge.sdk.models import BridgeSettings, ChatMessage, ToolCallInfo, default_home


class TestDefaultHome:
    def test_env_override(self, bridge_home: Path) -> None:
        assert default_home() == bridge_home

    def test_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MCPBRIDGE_HOME")
        assert default_home().name == ".mcpbridge"


class TestBridgeSettings:
    def test_max_attempts_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            BridgeSettings(max_attempts=0)

    def test_timeout_may_be_disabled(self) -> None:
        assert BridgeSettings(network_timeout=None).network_timeout is None


class TestChatMessage:
    def test_defaults(self) -> None:
        first = ChatMessage(role="user", content="hi")
        second = ChatMessage(role="user", content="hi")
        assert first.id.startswith("msg-")
        assert first.id != second.id
        assert first.timestamp.tzinfo is not None
        assert not first.is_error

    def test_tool_call_info(self) -> None:
        message = ChatMessage(
            role="tool",
            content="done",
            tool_call=ToolCallInfo(name="f", result={"ok": True}, status="success"),
        )
        assert message.tool_call is not None
        assert message.tool_call.status == "success"

    def test_invalid_role(self) -> None:
        with pytest.raises(ValidationError):
            ChatMessage(role="robot", content="x")  # type: ignore[arg-type]
