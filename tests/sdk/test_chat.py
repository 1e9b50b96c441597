"""Tests for ChatController with a scripted session and fake servers."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any
from unittest.mock import patch

import pytest

if TYPE_CHECKING:
    from pathlib import Path

from mcpbridge.core.interface.config import ModelConfig
from mcpbridge.core.interface.models import LlmResponse, TextContent, ToolCall, TurnContent
from mcpbridge.core.orchestration.events import EventKind
from mcpbridge.core.orchestration.models import TurnStatus
from mcpbridge.core.registry.models import Registry
from mcpbridge.core.schema.models import FunctionDeclaration
from mcpbridge.protocols.mcp.models import RawToolDescriptor, ToolCallResult
from mcpbridge.sdk.chat import EMPTY_RESPONSE_NOTICE, ChatController
from mcpbridge.sdk.models import BridgeSettings, ChatMessage
from mcpbridge.sdk.store import ServerConfigStore


class ScriptedSession:
    def __init__(self, script: Sequence[LlmResponse | BaseException] = ()) -> None:
        self.script = list(script)
        self.sent: list[TurnContent] = []
        self.declarations: list[FunctionDeclaration] = []

    async def send(self, content: TurnContent) -> LlmResponse:
        self.sent.append(content)
        step = self.script.pop(0)
        if isinstance(step, BaseException):
            raise step
        return step

    def set_available_functions(self, declarations: Sequence[FunctionDeclaration]) -> None:
        self.declarations = list(declarations)


class FakeConnection:
    def __init__(self, tools: list[RawToolDescriptor]) -> None:
        self.tools = tools
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def list_tools(self) -> list[RawToolDescriptor]:
        return self.tools

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolCallResult:
        self.calls.append((name, arguments))
        return ToolCallResult(content=[{"type": "text", "text": f"{name} ok"}])

    async def close(self) -> None:
        pass


class FakeConnector:
    def __init__(self, tools: dict[str, list[str]]) -> None:
        self.connections = {
            url: FakeConnection(
                [RawToolDescriptor(name=n, description=n, inputSchema={"type": "object"}) for n in names]
            )
            for url, names in tools.items()
        }

    async def connect(self, url: str) -> FakeConnection:
        return self.connections[url]


DOCS_URL = "http://docs.test/mcp"


@pytest.fixture
def store(tmp_path: Path) -> ServerConfigStore:
    return ServerConfigStore(tmp_path / "servers.yaml")


def _controller(
    store: ServerConfigStore,
    session: ScriptedSession,
    tools: dict[str, list[str]] | None = None,
    **settings: Any,
) -> ChatController:
    return ChatController(
        BridgeSettings(**settings),
        store=store,
        session=session,
        connector=FakeConnector(tools if tools is not None else {DOCS_URL: ["search"]}),
    )


class TestServerManagement:
    async def test_add_server_rediscovers(self, store: ServerConfigStore) -> None:
        session = ScriptedSession()
        controller = _controller(store, session)
        updates: list[Registry] = []
        controller.on(EventKind.TOOL_DISCOVERY_UPDATED, updates.append)

        result = await controller.add_server("docs", DOCS_URL)

        assert result.success
        assert controller.registry.names() == ["docs_search"]
        assert [d.name for d in session.declarations] == ["docs_search"]
        assert updates == [controller.registry]

    async def test_failed_add_does_not_rediscover(self, store: ServerConfigStore) -> None:
        controller = _controller(store, ScriptedSession())
        updates: list[Registry] = []
        controller.on(EventKind.TOOL_DISCOVERY_UPDATED, updates.append)

        result = await controller.add_server("docs", "nope")

        assert not result.success
        assert updates == []

    async def test_remove_server_rediscovers(self, store: ServerConfigStore) -> None:
        store.add_server("docs", DOCS_URL)
        session = ScriptedSession()
        controller = _controller(store, session)
        await controller.rediscover_tools()

        await controller.remove_server("docs")

        assert len(controller.registry) == 0
        assert session.declarations == []
        assert controller.list_servers() == []

    async def test_default_server(self, store: ServerConfigStore) -> None:
        controller = _controller(store, ScriptedSession(), tools={})
        store.add_server("a", "http://a.test/mcp")
        store.add_server("b", "http://b.test/mcp")

        assert controller.set_default_server("b").success
        default = controller.get_default_server()
        assert default is not None
        assert default.name == "b"
        server = controller.get_server("a")
        assert server is not None
        assert not server.is_default

    async def test_rediscover_without_servers(self, store: ServerConfigStore) -> None:
        controller = _controller(store, ScriptedSession())
        registry = await controller.rediscover_tools()
        assert len(registry) == 0


class TestSendMessage:
    async def test_text_reply(self, store: ServerConfigStore) -> None:
        session = ScriptedSession([LlmResponse(text="Hello!")])
        controller = _controller(store, session)
        seen: list[ChatMessage] = []
        controller.on(EventKind.MESSAGE, seen.append)

        outcome = await controller.send_message("Hi")

        assert outcome.status is TurnStatus.TEXT
        assert [(m.role, m.content) for m in seen] == [("user", "Hi"), ("assistant", "Hello!")]
        assert controller.get_chat_history() == seen

    async def test_tool_call_transcript(self, store: ServerConfigStore) -> None:
        store.add_server("docs", DOCS_URL)
        session = ScriptedSession(
            [
                LlmResponse(function_calls=[ToolCall(name="docs_search", arguments={"q": "x"})]),
                LlmResponse(text="Found it"),
            ]
        )
        controller = _controller(store, session)
        await controller.rediscover_tools()

        await controller.send_message("Find x")

        history = controller.get_chat_history()
        assert [m.role for m in history] == ["user", "system", "tool", "assistant"]
        starting, ended = history[1], history[2]
        assert starting.tool_call is not None
        assert starting.tool_call.name == "docs_search"
        assert starting.tool_call.status == "pending"
        assert ended.tool_call is not None
        assert ended.tool_call.status == "success"
        assert not ended.is_error

    async def test_blocked(self, store: ServerConfigStore) -> None:
        session = ScriptedSession([LlmResponse(block_reason="SAFETY")])
        controller = _controller(store, session)

        outcome = await controller.send_message("bad")

        assert outcome.status is TurnStatus.BLOCKED
        last = controller.get_chat_history()[-1]
        assert last.role == "system"
        assert last.is_error
        assert "SAFETY" in last.content

    async def test_empty_reply(self, store: ServerConfigStore) -> None:
        controller = _controller(store, ScriptedSession([LlmResponse()]))
        await controller.send_message("Hi")
        last = controller.get_chat_history()[-1]
        assert last.content == EMPTY_RESPONSE_NOTICE

    async def test_transport_error(self, store: ServerConfigStore) -> None:
        controller = _controller(store, ScriptedSession([RuntimeError("Failed to fetch")]))
        errors: list[Any] = []
        controller.on(EventKind.TURN_ERROR, errors.append)

        outcome = await controller.send_message("Hi")

        assert outcome.status is TurnStatus.TRANSPORT_ERROR
        last = controller.get_chat_history()[-1]
        assert last.is_error
        assert last.content == outcome.text
        assert errors == [outcome]

    async def test_respects_max_attempts(self, store: ServerConfigStore) -> None:
        looping = LlmResponse(function_calls=[ToolCall(name="ghost")])
        session = ScriptedSession([looping] * 2)
        controller = _controller(store, session, max_attempts=2)

        outcome = await controller.send_message("loop")

        assert outcome.status is TurnStatus.EXHAUSTED
        assert len(session.sent) == 2

    async def test_attachments(self, store: ServerConfigStore, tmp_path: Path) -> None:
        note = tmp_path / "note.txt"
        note.write_text("remember this")
        session = ScriptedSession([LlmResponse(text="ok")])
        controller = _controller(store, session)

        await controller.send_message("Read this", [note])

        sent = session.sent[0]
        assert isinstance(sent, list)
        assert sent[0] == TextContent(text="Read this")
        user = controller.get_chat_history()[0]
        assert user.content == "Read this"
        assert user.parts is not None
        assert len(user.parts) == 2


class TestReconfigure:
    async def test_resets_session_and_transcript(self, store: ServerConfigStore) -> None:
        controller = _controller(store, ScriptedSession([LlmResponse(text="Hello!")]))
        await controller.send_message("Hi")

        with patch("mcpbridge.sdk.chat.LiteLLMSession") as session_cls:
            controller.reconfigure(ModelConfig(model="openai/gpt-4o", api_key="k"))

        session_cls.assert_called_once()
        assert controller.settings.model.model == "openai/gpt-4o"
        history = controller.get_chat_history()
        assert len(history) == 1
        assert history[0].role == "system"
