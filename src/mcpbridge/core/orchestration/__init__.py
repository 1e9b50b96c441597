"""Orchestration — the per-turn function-calling loop and its events."""

from mcpbridge.core.orchestration.events import EventBus, EventKind
from mcpbridge.core.orchestration.models import (
    DEFAULT_MAX_ATTEMPTS,
    EXHAUSTED_MESSAGE,
    TurnOutcome,
    TurnStatus,
)
from mcpbridge.core.orchestration.turn import TurnOrchestrator

__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "EXHAUSTED_MESSAGE",
    "EventBus",
    "EventKind",
    "TurnOrchestrator",
    "TurnOutcome",
    "TurnStatus",
]
