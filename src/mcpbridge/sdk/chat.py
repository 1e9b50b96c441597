"""ChatController — the session facade over discovery and the turn loop.

Owns the user-facing transcript, the server configuration, and the current
registry.  Re-publishes everything that happens as :class:`EventKind`
events.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from mcpbridge.core.interface.attachments import build_user_content
from mcpbridge.core.interface.session import LiteLLMSession
from mcpbridge.core.orchestration.events import EventBus, EventKind, Listener
from mcpbridge.core.orchestration.models import TurnOutcome, TurnStatus
from mcpbridge.core.orchestration.turn import TurnOrchestrator
from mcpbridge.core.registry.discovery import DiscoveryCoordinator
from mcpbridge.core.registry.models import Registry, ServerDescriptor
from mcpbridge.protocols.mcp.client import MCPConnector
from mcpbridge.sdk.models import BridgeSettings, ChatMessage, ToolCallInfo
from mcpbridge.sdk.store import ServerConfigStore, StoreResult

if TYPE_CHECKING:
    from mcpbridge.core.interface.config import ModelConfig
    from mcpbridge.core.interface.session import LlmSession
    from mcpbridge.protocols.provider import ToolProviderConnector

logger = logging.getLogger(__name__)

EMPTY_RESPONSE_NOTICE = "Assistant did not provide a text response."


class ChatController:
    """High-level chat API used by the CLI (and any other front end).

    Usage::

        controller = ChatController(BridgeSettings())
        controller.on(EventKind.MESSAGE, print)
        await controller.rediscover_tools()
        await controller.send_message("Summarise the open issues")
    """

    def __init__(
        self,
        settings: BridgeSettings | None = None,
        *,
        store: ServerConfigStore | None = None,
        session: LlmSession | None = None,
        connector: ToolProviderConnector | None = None,
        events: EventBus | None = None,
    ) -> None:
        self.settings = settings if settings is not None else BridgeSettings()
        self.store = (
            store if store is not None else ServerConfigStore(self.settings.resolved_servers_path())
        )
        self.events = events if events is not None else EventBus()
        self.messages: list[ChatMessage] = []

        timeout = self.settings.network_timeout
        self._connector = connector if connector is not None else MCPConnector(timeout=timeout)
        self._discovery = DiscoveryCoordinator(self._connector, timeout=timeout)
        self._session = session if session is not None else LiteLLMSession(self.settings.model)
        self._orchestrator = self._build_orchestrator()
        self._registry = Registry()
        self._turn_lock = asyncio.Lock()

        self.events.on(EventKind.TOOL_CALL_STARTING, self._record_tool_call_start)
        self.events.on(EventKind.TOOL_CALL_ENDED, self._record_tool_call_end)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on(self, kind: EventKind, listener: Listener) -> None:
        self.events.on(kind, listener)

    def off(self, kind: EventKind, listener: Listener) -> None:
        self.events.off(kind, listener)

    # ------------------------------------------------------------------
    # Server management
    # ------------------------------------------------------------------

    async def add_server(self, name: str, url: str) -> StoreResult:
        result = self.store.add_server(name, url)
        if result.success:
            await self.rediscover_tools()
        return result

    async def remove_server(self, name: str) -> StoreResult:
        result = self.store.remove_server(name)
        if result.success:
            await self.rediscover_tools()
        return result

    def set_default_server(self, name: str) -> StoreResult:
        # Discovery always covers every server, so the default is only a hint.
        return self.store.set_default_server(name)

    def list_servers(self) -> list[ServerDescriptor]:
        return self.store.list_servers()

    def get_server(self, name: str) -> ServerDescriptor | None:
        return self.store.get_server(name)

    def get_default_server(self) -> ServerDescriptor | None:
        return self.store.get_default_server()

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    @property
    def registry(self) -> Registry:
        return self._registry

    async def rediscover_tools(self) -> Registry:
        """Run a fresh discovery round and point the session at the result."""
        servers = self.list_servers()
        if not servers:
            logger.info("No MCP servers configured; tool discovery skipped")
            self._registry = Registry()
        else:
            result = await self._discovery.discover(servers)
            self._registry = result.registry
        self._session.set_available_functions(self._registry.declarations())
        self.events.emit(EventKind.TOOL_DISCOVERY_UPDATED, self._registry)
        return self._registry

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    def get_chat_history(self) -> list[ChatMessage]:
        return list(self.messages)

    async def send_message(
        self,
        text: str,
        attachments: Iterable[str | Path] = (),
    ) -> TurnOutcome:
        """Run one user turn and record everything it produced.

        Turns are serialised: a second call waits for the first to finish.
        """
        async with self._turn_lock:
            content = build_user_content(text, attachments)
            self._add_message(
                role="user",
                content=text,
                parts=None if isinstance(content, str) else content,
            )

            outcome = await self._orchestrator.run_turn(content, self._registry)
            self._record_outcome(outcome)
            return outcome

    def reconfigure(self, model: ModelConfig) -> None:
        """Switch to a new model configuration (e.g. a new API key).

        The model-side conversation cannot survive the switch, so the
        transcript is cleared as well.
        """
        self.settings = self.settings.model_copy(update={"model": model})
        self._session = LiteLLMSession(model)
        self._session.set_available_functions(self._registry.declarations())
        self._orchestrator = self._build_orchestrator()
        self.messages = []
        self._add_message(role="system", content="Model configuration updated. Chat session reset.")
        logger.info("Model configuration updated to %s; session reset", model.model)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _build_orchestrator(self) -> TurnOrchestrator:
        return TurnOrchestrator(
            self._session,
            self._connector,
            events=self.events,
            max_attempts=self.settings.max_attempts,
            timeout=self.settings.network_timeout,
        )

    def _record_outcome(self, outcome: TurnOutcome) -> None:
        if outcome.status is TurnStatus.TEXT and not outcome.empty:
            self._add_message(role="assistant", content=outcome.text)
        elif outcome.status is TurnStatus.TEXT:
            self._add_message(role="system", content=EMPTY_RESPONSE_NOTICE, is_error=True)
        elif outcome.status is TurnStatus.BLOCKED:
            detail = f" {outcome.block_message}" if outcome.block_message else ""
            self._add_message(
                role="system",
                content=f"Assistant's response was blocked: {outcome.block_reason}.{detail}",
                is_error=True,
            )
        else:
            self._add_message(role="system", content=outcome.text, is_error=True)

    def _record_tool_call_start(self, name: str, arguments: dict[str, Any]) -> None:
        self._add_message(
            role="system",
            content=f"Attempting to call tool: {name} with args: {json.dumps(arguments, default=str)}",
            tool_call=ToolCallInfo(name=name, arguments=arguments, status="pending"),
        )

    def _record_tool_call_end(self, name: str, result: dict[str, Any], success: bool) -> None:
        verdict = "succeeded" if success else "failed"
        self._add_message(
            role="tool",
            content=f"Tool {name} {verdict}. Result: {json.dumps(result, default=str)}",
            tool_call=ToolCallInfo(
                name=name, result=result, status="success" if success else "error"
            ),
            is_error=not success,
        )

    def _add_message(self, **fields: Any) -> ChatMessage:
        message = ChatMessage(**fields)
        self.messages.append(message)
        self.events.emit(EventKind.MESSAGE, message)
        return message
