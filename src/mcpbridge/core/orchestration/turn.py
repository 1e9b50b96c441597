"""TurnOrchestrator — drives one user turn through the function-calling loop.

One turn is a sequence of round-trips to the model.  Whenever the model
asks for function calls, each call is dispatched to its owning server (one
at a time, in the order requested) and the results become the next
message.  The loop ends on a text answer, a blocked response, a failed
send, or after ``max_attempts`` sends.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TYPE_CHECKING, TypeVar

from mcpbridge.core.interface.errors import classify_llm_error
from mcpbridge.core.interface.models import FunctionResult, ToolCall
from mcpbridge.core.orchestration.events import EventBus, EventKind
from mcpbridge.core.orchestration.models import (
    DEFAULT_MAX_ATTEMPTS,
    EXHAUSTED_MESSAGE,
    GENERIC_ERROR_MESSAGE,
    TurnOutcome,
    TurnStatus,
)
from mcpbridge.protocols.errors import ToolExecutionError, ToolNotFoundError
from mcpbridge.utils.telemetry import (
    ATTR_ATTEMPT,
    ATTR_MAX_ATTEMPTS,
    ATTR_SERVER_NAME,
    ATTR_TOOL_NAME,
    ATTR_TOOL_SUCCESS,
    ATTR_TURN_STATUS,
    get_tracer,
)

if TYPE_CHECKING:
    from mcpbridge.core.interface.models import TurnContent
    from mcpbridge.core.interface.session import LlmSession
    from mcpbridge.core.registry.models import Registry
    from mcpbridge.protocols.provider import ToolProviderConnection, ToolProviderConnector

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

T = TypeVar("T")


class TurnOrchestrator:
    """Runs user turns against an :class:`LlmSession` and a registry.

    Not re-entrant: callers must wait for one turn to finish before
    starting the next on the same session.

    Usage::

        orchestrator = TurnOrchestrator(session, MCPConnector(), events=bus)
        outcome = await orchestrator.run_turn("Find docs about retries", registry)
    """

    def __init__(
        self,
        session: LlmSession,
        connector: ToolProviderConnector,
        *,
        events: EventBus | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        timeout: float | None = None,
    ) -> None:
        if max_attempts < 1:
            msg = "max_attempts must be at least 1"
            raise ValueError(msg)
        self.session = session
        self._connector = connector
        self._events = events if events is not None else EventBus()
        self._max_attempts = max_attempts
        self._timeout = timeout

    @property
    def events(self) -> EventBus:
        return self._events

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    async def run_turn(self, content: TurnContent, registry: Registry) -> TurnOutcome:
        """Drive one turn to a terminal outcome.  Never raises."""
        with _tracer.start_as_current_span("turn") as span:
            span.set_attribute(ATTR_MAX_ATTEMPTS, self._max_attempts)
            try:
                outcome = await self._run(content, registry)
            except Exception:
                logger.exception("Unhandled error while running a turn")
                outcome = TurnOutcome(
                    status=TurnStatus.ERROR,
                    text=f"Error: {GENERIC_ERROR_MESSAGE}",
                )
            span.set_attribute(ATTR_TURN_STATUS, outcome.status.value)

        if outcome.is_error:
            self._events.emit(EventKind.TURN_ERROR, outcome)
        return outcome

    async def _run(self, content: TurnContent, registry: Registry) -> TurnOutcome:
        pending: TurnContent = content
        attempt = 0

        while True:
            attempt += 1
            if attempt > self._max_attempts:
                logger.error("Exceeded maximum of %d model round-trips", self._max_attempts)
                return TurnOutcome(
                    status=TurnStatus.EXHAUSTED,
                    text=EXHAUSTED_MESSAGE,
                    attempts=self._max_attempts,
                )

            logger.debug("Model call, attempt %d", attempt)
            try:
                with _tracer.start_as_current_span("turn.send") as span:
                    span.set_attribute(ATTR_ATTEMPT, attempt)
                    response = await self._bounded(self.session.send(pending))
            except Exception as exc:
                classified = classify_llm_error(exc)
                logger.error(
                    "Error sending message to the model (%s): %s",
                    classified.kind.value,
                    classified.detail,
                )
                return TurnOutcome(
                    status=TurnStatus.TRANSPORT_ERROR,
                    text=f"Error: {classified.message}",
                    attempts=attempt,
                    error=classified,
                )

            if response.function_calls:
                calls = response.function_calls
                logger.info("Model requested %d function call(s)", len(calls))
                self._events.emit(EventKind.TOOL_CALL_STARTING, calls[0].name, calls[0].arguments)

                results: list[FunctionResult] = []
                for call in calls:
                    results.append(await self._dispatch(call, registry))
                pending = results
                continue

            if response.block_reason:
                logger.warning(
                    "Content blocked due to %s: %s", response.block_reason, response.block_message
                )
                return TurnOutcome(
                    status=TurnStatus.BLOCKED,
                    text=f"I'm sorry, your request was blocked: {response.block_reason}.",
                    attempts=attempt,
                    block_reason=response.block_reason,
                    block_message=response.block_message,
                )

            if response.text is not None:
                return TurnOutcome(status=TurnStatus.TEXT, text=response.text, attempts=attempt)

            logger.warning("Received a response with no text, no block reason and no calls")
            return TurnOutcome(status=TurnStatus.TEXT, text="", attempts=attempt, empty=True)

    async def _dispatch(self, call: ToolCall, registry: Registry) -> FunctionResult:
        """Execute one requested call; failures become error-shaped results."""
        with _tracer.start_as_current_span("turn.tool_call") as span:
            span.set_attribute(ATTR_TOOL_NAME, call.name)

            mapping = registry.get(call.name)
            if mapping is None:
                error = ToolNotFoundError(call.name)
                logger.error("No mapped tool for function %r", call.name)
                result = FunctionResult.error(call, str(error))
                span.set_attribute(ATTR_TOOL_SUCCESS, False)
                self._events.emit(EventKind.TOOL_CALL_ENDED, call.name, result.response, False)
                return result

            span.set_attribute(ATTR_SERVER_NAME, mapping.server_name)
            success = False
            connection: ToolProviderConnection | None = None
            try:
                connection = await self._bounded(self._connector.connect(mapping.server_url))
                tool_result = await self._bounded(
                    connection.call_tool(mapping.provider_tool_name, call.arguments)
                )
                success = not tool_result.is_error
                result = FunctionResult(
                    call_id=call.id, name=call.name, response=tool_result.to_payload()
                )
                logger.info(
                    "MCP tool %r on server %r executed (success=%s)",
                    mapping.provider_tool_name,
                    mapping.server_name,
                    success,
                )
            except Exception as exc:
                error = ToolExecutionError(
                    mapping.provider_tool_name, str(exc) or exc.__class__.__name__
                )
                logger.error("Error during MCP tool execution for %s: %s", call.name, error)
                result = FunctionResult.error(call, str(error))
            finally:
                if connection is not None:
                    await connection.close()

            span.set_attribute(ATTR_TOOL_SUCCESS, success)
            self._events.emit(EventKind.TOOL_CALL_ENDED, call.name, result.response, success)
            return result

    async def _bounded(self, operation: Awaitable[T]) -> T:
        if self._timeout is None:
            return await operation
        return await asyncio.wait_for(operation, self._timeout)
