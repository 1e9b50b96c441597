"""LLM sessions — one conversation with a function-calling model.

:class:`LiteLLMSession` wraps LiteLLM behind the small interface the turn
orchestrator needs: ``send`` content (user input or function results) and
get back text, requested function calls, or a block reason.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import litellm

from mcpbridge.core.interface.config import ModelConfig
from mcpbridge.core.interface.errors import LlmTransportError
from mcpbridge.core.interface.models import (
    CanonicalMessage,
    ConversationHistory,
    FunctionResult,
    LlmResponse,
    ToolCall,
    TurnContent,
)
from mcpbridge.core.interface.render import parse_arguments, render_messages, render_tools
from mcpbridge.utils.telemetry import ATTR_FINISH_REASON, ATTR_MODEL, get_tracer

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mcpbridge.core.schema.models import FunctionDeclaration

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

BLOCKED_FINISH_REASONS = frozenset({"content_filter", "safety", "blocklist", "prohibited_content"})
EMPTY_RESPONSE_MARKER = "[Empty Response]"


@runtime_checkable
class LlmSession(Protocol):
    """The model-facing side of a chat."""

    async def send(self, content: TurnContent) -> LlmResponse:
        """Send user content or function results and return the model's reply."""
        ...

    def set_available_functions(self, declarations: Sequence[FunctionDeclaration]) -> None:
        """Replace the functions the model may call."""
        ...


class LiteLLMSession:
    """Chat session backed by ``litellm.acompletion``.

    The session owns the canonical history: every ``send`` appends the
    outgoing content and the model's reply.

    Usage::

        session = LiteLLMSession(ModelConfig(model="gemini/gemini-2.5-flash"))
        session.set_available_functions(registry.declarations())
        response = await session.send("What's the weather in Oslo?")
    """

    def __init__(
        self,
        config: ModelConfig,
        history: ConversationHistory | None = None,
    ) -> None:
        self.config = config
        self.history = history if history is not None else ConversationHistory()
        self._tools: list[dict[str, Any]] = []
        if config.system_prompt and not any(m.role == "system" for m in self.history):
            self.history.messages.insert(0, CanonicalMessage.system(config.system_prompt))

    @property
    def tools(self) -> list[dict[str, Any]]:
        return list(self._tools)

    def set_available_functions(self, declarations: Sequence[FunctionDeclaration]) -> None:
        self._tools = render_tools(declarations)
        if self._tools:
            logger.info("Model %s configured with %d tool(s)", self.config.model, len(self._tools))
        else:
            logger.info("No tools provided; %s will run without tool calling", self.config.model)

    async def send(self, content: TurnContent) -> LlmResponse:
        """Append *content* to the history, call the model, record its reply.

        If the call fails the outgoing content is rolled back so the history
        stays a valid alternation for the next turn.
        """
        mark = len(self.history)
        self._append_outgoing(content)

        with _tracer.start_as_current_span("llm.send") as span:
            span.set_attribute(ATTR_MODEL, self.config.model)
            try:
                raw = await litellm.acompletion(**self._call_kwargs())  # pyright: ignore[reportUnknownMemberType]
                response = self._parse_response(raw)
            except BaseException:
                del self.history.messages[mark:]
                raise

            if response.finish_reason is not None:
                span.set_attribute(ATTR_FINISH_REASON, response.finish_reason)

        self.history.append(
            CanonicalMessage.assistant(
                self._history_text(response),
                tool_calls=response.function_calls or None,
                finish_reason=response.finish_reason,
            )
        )
        return response

    @staticmethod
    def _history_text(response: LlmResponse) -> str:
        """Text recorded for the model's turn; never empty without tool calls."""
        if response.text or response.function_calls:
            return response.text or ""
        if response.block_reason:
            detail = f" {response.block_message}" if response.block_message else ""
            return (
                f"[Blocked Response: Assistant's response was blocked: "
                f"{response.block_reason}.{detail}]"
            )
        return EMPTY_RESPONSE_MARKER

    def _append_outgoing(self, content: TurnContent) -> None:
        if content and not isinstance(content, str):
            results = [item for item in content if isinstance(item, FunctionResult)]
            if len(results) == len(content):
                for result in results:
                    self._append_result(result)
                return

        self._answer_dangling_calls()
        if isinstance(content, str):
            self.history.append(CanonicalMessage.user(content))
        else:
            self.history.append(CanonicalMessage.user(list(content)))  # type: ignore[arg-type]

    def _append_result(self, result: FunctionResult) -> None:
        self.history.append(CanonicalMessage.tool(result, json.dumps(result.response, default=str)))

    def _answer_dangling_calls(self) -> None:
        """Close calls left unanswered by an aborted turn.

        Providers reject a user message that follows an assistant message
        whose tool calls never got results.
        """
        if not self.history.messages:
            return
        last = self.history.messages[-1]
        if last.role != "assistant" or not last.tool_calls:
            return
        for call in last.tool_calls:
            self._append_result(FunctionResult.error(call, "Tool call was not completed."))

    def _call_kwargs(self) -> dict[str, Any]:
        call_kwargs: dict[str, Any] = {
            "model": self.config.model,
            "messages": render_messages(self.history),
            **self.config.extra,
        }
        if self.config.temperature is not None:
            call_kwargs["temperature"] = self.config.temperature
        if self.config.api_key:
            call_kwargs["api_key"] = self.config.api_key
        if self.config.api_base:
            call_kwargs["api_base"] = self.config.api_base
        if self._tools:
            call_kwargs["tools"] = self._tools
        return call_kwargs

    @staticmethod
    def _parse_response(response: Any) -> LlmResponse:
        """Convert a LiteLLM (OpenAI-compatible) response to an LlmResponse."""
        if not getattr(response, "choices", None):
            msg = "The model returned no response content."
            raise LlmTransportError(msg)

        choice = response.choices[0]
        message = choice.message
        finish_reason = choice.finish_reason
        finish = str(finish_reason) if finish_reason is not None else None

        calls: list[ToolCall] = []
        for tc in message.tool_calls or []:
            call = ToolCall(name=tc.function.name, arguments=parse_arguments(tc.function.arguments))
            if tc.id:
                call.id = tc.id
            calls.append(call)

        text = message.content if isinstance(message.content, str) else None
        block_reason = None
        block_message = None
        if not calls and not text and finish is not None and finish.lower() in BLOCKED_FINISH_REASONS:
            block_reason = finish.upper()
            block_message = "The response was withheld by the provider's safety filter."

        metadata: dict[str, Any] = {}
        usage = getattr(response, "usage", None)
        if usage:
            metadata["usage"] = {
                "prompt_tokens": usage.prompt_tokens,
                "completion_tokens": usage.completion_tokens,
                "total_tokens": usage.total_tokens,
            }
        metadata["model"] = getattr(response, "model", None)

        return LlmResponse(
            text=text,
            function_calls=calls,
            block_reason=block_reason,
            block_message=block_message,
            finish_reason=finish,
            metadata=metadata,
        )
