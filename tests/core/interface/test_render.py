"""Tests for rendering canonical history to LiteLLM messages."""

from __future__ import annotations

import json

from mcpbridge.core.interface.models import (
    AudioContent,
    CanonicalMessage,
    ConversationHistory,
    FileContent,
    FunctionResult,
    TextContent,
    ToolCall,
)
from mcpbridge.core.interface.render import parse_arguments, render_message, render_messages


class TestRenderMessage:
    def test_plain_text(self) -> None:
        assert render_message(CanonicalMessage.user("hi")) == {"role": "user", "content": "hi"}

    def test_assistant_with_tool_calls(self) -> None:
        msg = CanonicalMessage.assistant(
            tool_calls=[ToolCall(id="c1", name="f", arguments={"a": 1})]
        )
        assert render_message(msg) == {
            "role": "assistant",
            "content": None,
            "tool_calls": [
                {
                    "id": "c1",
                    "type": "function",
                    "function": {"name": "f", "arguments": json.dumps({"a": 1})},
                }
            ],
        }

    def test_tool_message(self) -> None:
        result = FunctionResult(call_id="c1", name="f", response={"ok": True})
        msg = CanonicalMessage.tool(result, '{"ok": true}')
        assert render_message(msg) == {
            "role": "tool",
            "tool_call_id": "c1",
            "name": "f",
            "content": '{"ok": true}',
        }

    def test_file_and_audio_parts(self) -> None:
        msg = CanonicalMessage.user(
            [
                TextContent(text="see attached"),
                FileContent(data="JVBE", media_type="application/pdf", filename="a.pdf"),
                AudioContent(data="UklG", media_type="audio/wav"),
            ]
        )
        content = render_message(msg)["content"]
        assert content[1] == {
            "type": "file",
            "file": {"file_data": "data:application/pdf;base64,JVBE"},
        }
        assert content[2] == {
            "type": "input_audio",
            "input_audio": {"data": "UklG", "format": "wav"},
        }

    def test_history(self) -> None:
        history = ConversationHistory(
            messages=[CanonicalMessage.system("rules"), CanonicalMessage.user("q")]
        )
        assert [m["role"] for m in render_messages(history)] == ["system", "user"]


class TestParseArguments:
    def test_json_string(self) -> None:
        assert parse_arguments('{"q": "x"}') == {"q": "x"}

    def test_dict_passthrough(self) -> None:
        assert parse_arguments({"q": "x"}) == {"q": "x"}

    def test_invalid_json(self) -> None:
        assert parse_arguments("{nope") == {"raw": "{nope"}

    def test_non_object_json(self) -> None:
        assert parse_arguments("[1, 2]") == {"value": [1, 2]}

    def test_none(self) -> None:
        assert parse_arguments(None) == {"raw": None}
