"""EventBus — ordered publish/subscribe with isolated listeners."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class EventKind(str, Enum):
    """Events published by the chat controller and turn orchestrator.

    Listener signatures:

    - ``MESSAGE(message: ChatMessage)``
    - ``TOOL_DISCOVERY_UPDATED(registry: Registry)``
    - ``TOOL_CALL_STARTING(name: str, arguments: dict)``
    - ``TOOL_CALL_ENDED(name: str, result: dict, success: bool)``
    - ``TURN_ERROR(outcome: TurnOutcome)``
    """

    MESSAGE = "message"
    TOOL_DISCOVERY_UPDATED = "tool_discovery_updated"
    TOOL_CALL_STARTING = "tool_call_starting"
    TOOL_CALL_ENDED = "tool_call_ended"
    TURN_ERROR = "turn_error"


class EventBus:
    """Maps each :class:`EventKind` to an ordered list of listeners.

    Listeners run synchronously, in subscription order.  An exception raised
    by one listener is logged and does not affect the others or the emitter.
    """

    def __init__(self) -> None:
        self._listeners: dict[EventKind, list[Listener]] = {}

    def on(self, kind: EventKind, listener: Listener) -> None:
        """Subscribe *listener* to *kind*."""
        self._listeners.setdefault(kind, []).append(listener)

    def off(self, kind: EventKind, listener: Listener) -> None:
        """Unsubscribe *listener*; unknown listeners are ignored."""
        listeners = self._listeners.get(kind)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def listeners(self, kind: EventKind) -> list[Listener]:
        return list(self._listeners.get(kind, []))

    def emit(self, kind: EventKind, *args: Any) -> None:
        """Deliver an event to every current listener of *kind*."""
        for listener in self.listeners(kind):
            try:
                listener(*args)
            except Exception:
                logger.exception("Error in listener for event %r", kind.value)
