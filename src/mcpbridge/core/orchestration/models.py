"""Turn outcome models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from mcpbridge.core.interface.errors import ClassifiedError

DEFAULT_MAX_ATTEMPTS = 5

EXHAUSTED_MESSAGE = (
    "I tried several times, but I'm having trouble completing your request with tools."
)
GENERIC_ERROR_MESSAGE = "An unexpected error occurred while handling your request."


class TurnStatus(str, Enum):
    """Terminal states of one user turn."""

    TEXT = "text"
    BLOCKED = "blocked"
    EXHAUSTED = "exhausted"
    TRANSPORT_ERROR = "transport_error"
    ERROR = "error"


class TurnOutcome(BaseModel):
    """How a turn ended.

    ``text`` is the model's answer for ``TEXT`` and a user-facing
    explanation for every other status.  ``empty`` marks a ``TEXT`` outcome
    where the model produced neither text, calls, nor a block reason; its
    ``text`` is ``""``.
    """

    status: TurnStatus
    text: str = ""
    attempts: int = 0
    empty: bool = False
    block_reason: str | None = None
    block_message: str | None = None
    error: ClassifiedError | None = None

    @property
    def is_error(self) -> bool:
        return self.status in (TurnStatus.EXHAUSTED, TurnStatus.TRANSPORT_ERROR, TurnStatus.ERROR)
