"""Tests for the canonical message models."""

import pytest
from pydantic import ValidationError

from mcpbridge.core.interface.config import DEFAULT_MODEL, ModelConfig
from mcpbridge.core.interface.models import (
    CanonicalMessage,
    ConversationHistory,
    FunctionResult,
    ImageContent,
    TextContent,
    ToolCall,
)


class TestContentParts:
    def test_text_content(self) -> None:
        part = TextContent(text="hello")
        assert part.type == "text"
        assert part.text == "hello"

    def test_image_content_inline(self) -> None:
        part = ImageContent(data="aGk=", media_type="image/png")
        assert part.type == "image"
        assert part.url is None

    def test_text_requires_text(self) -> None:
        with pytest.raises(ValidationError):
            TextContent()  # type: ignore[call-arg]


class TestToolCall:
    def test_generated_id(self) -> None:
        first = ToolCall(name="f")
        second = ToolCall(name="f")
        assert first.id != second.id
        assert first.arguments == {}


class TestFunctionResult:
    def test_error(self) -> None:
        call = ToolCall(id="c1", name="docs_search")
        result = FunctionResult.error(call, "boom")
        assert result.call_id == "c1"
        assert result.name == "docs_search"
        assert result.response == {"error": "boom"}
        assert result.is_error

    def test_is_error_flag(self) -> None:
        result = FunctionResult(call_id="c", name="f", response={"content": [], "isError": True})
        assert result.is_error

    def test_success(self) -> None:
        result = FunctionResult(call_id="c", name="f", response={"content": []})
        assert not result.is_error


class TestCanonicalMessage:
    def test_user_from_text(self) -> None:
        msg = CanonicalMessage.user("hi")
        assert msg.role == "user"
        assert msg.text == "hi"

    def test_user_from_parts(self) -> None:
        msg = CanonicalMessage.user([TextContent(text="a"), ImageContent(url="http://x/y.png")])
        assert len(msg.content) == 2
        assert msg.text == "a"

    def test_assistant_without_text(self) -> None:
        msg = CanonicalMessage.assistant(tool_calls=[ToolCall(name="f")])
        assert msg.content == []
        assert msg.tool_calls is not None

    def test_tool(self) -> None:
        result = FunctionResult(call_id="c1", name="f", response={})
        msg = CanonicalMessage.tool(result, "{}")
        assert msg.role == "tool"
        assert msg.tool_call_id == "c1"
        assert msg.name == "f"


class TestConversationHistory:
    def test_append_and_clear(self) -> None:
        history = ConversationHistory()
        history.append(CanonicalMessage.user("a"))
        history.append(CanonicalMessage.assistant("b"))
        assert len(history) == 2
        assert [m.role for m in history] == ["user", "assistant"]
        history.clear()
        assert len(history) == 0


class TestModelConfig:
    def test_defaults(self) -> None:
        config = ModelConfig()
        assert config.model == DEFAULT_MODEL
        assert config.temperature == 0.7
        assert config.provider == "gemini"

    def test_provider_no_prefix(self) -> None:
        assert ModelConfig(model="gpt-4o").provider == "openai"
