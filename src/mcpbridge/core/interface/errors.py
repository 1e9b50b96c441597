"""LLM transport error classification.

A failed ``send`` ends the current turn.  The failure is sorted into a
small set of kinds, each with its own user-facing message.
"""

from __future__ import annotations

import asyncio
from enum import Enum

import litellm
from pydantic import BaseModel


class LlmErrorKind(str, Enum):
    INVALID_CREDENTIAL = "invalid_credential"
    RATE_LIMITED = "rate_limited"
    NETWORK = "network"
    UNKNOWN = "unknown"


USER_MESSAGES: dict[LlmErrorKind, str] = {
    LlmErrorKind.INVALID_CREDENTIAL: (
        "The API key for the language model is not valid. Please check your API key."
    ),
    LlmErrorKind.RATE_LIMITED: (
        "You may have exceeded your API quota or rate limit. Please check your provider dashboard."
    ),
    LlmErrorKind.NETWORK: "A network error occurred. Please check your internet connection.",
    LlmErrorKind.UNKNOWN: "An error occurred while communicating with the AI.",
}

_CREDENTIAL_MARKERS = ("api key not valid", "invalid api key", "api_key_invalid", "unauthorized")
_RATE_MARKERS = ("quota", "rate limit", "rate_limit", "too many requests", "resource_exhausted")
_NETWORK_MARKERS = ("fetch", "network", "connection", "timed out", "timeout")


class ClassifiedError(BaseModel):
    """A classified LLM failure."""

    kind: LlmErrorKind
    message: str
    detail: str = ""


class LlmTransportError(Exception):
    """Raised by sessions for failures that are not provider exceptions."""


def classify_llm_error(exc: BaseException) -> ClassifiedError:
    """Sort *exc* into an :class:`LlmErrorKind`.

    LiteLLM exception types are checked first; anything else is classified
    by the content of its message.
    """
    detail = str(exc) or exc.__class__.__name__
    kind = _kind_from_type(exc) or _kind_from_message(detail.lower())
    return ClassifiedError(kind=kind, message=USER_MESSAGES[kind], detail=detail)


def _kind_from_type(exc: BaseException) -> LlmErrorKind | None:
    if isinstance(exc, litellm.AuthenticationError):
        return LlmErrorKind.INVALID_CREDENTIAL
    if isinstance(exc, litellm.RateLimitError):
        return LlmErrorKind.RATE_LIMITED
    if isinstance(exc, (litellm.Timeout, litellm.APIConnectionError, asyncio.TimeoutError)):
        return LlmErrorKind.NETWORK
    if isinstance(exc, OSError):
        return LlmErrorKind.NETWORK
    return None


def _kind_from_message(message: str) -> LlmErrorKind:
    if any(marker in message for marker in _CREDENTIAL_MARKERS):
        return LlmErrorKind.INVALID_CREDENTIAL
    if any(marker in message for marker in _RATE_MARKERS):
        return LlmErrorKind.RATE_LIMITED
    if any(marker in message for marker in _NETWORK_MARKERS):
        return LlmErrorKind.NETWORK
    return LlmErrorKind.UNKNOWN
