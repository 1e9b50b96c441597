"""Model interface — canonical messages and the LLM session."""

from mcpbridge.core.interface.config import DEFAULT_MODEL, ModelConfig
from mcpbridge.core.interface.errors import (
    ClassifiedError,
    LlmErrorKind,
    LlmTransportError,
    classify_llm_error,
)
from mcpbridge.core.interface.models import (
    AudioContent,
    CanonicalMessage,
    ContentPart,
    ConversationHistory,
    FileContent,
    FunctionResult,
    ImageContent,
    LlmResponse,
    TextContent,
    ToolCall,
    TurnContent,
)
from mcpbridge.core.interface.session import LiteLLMSession, LlmSession

__all__ = [
    "DEFAULT_MODEL",
    "AudioContent",
    "CanonicalMessage",
    "ClassifiedError",
    "ContentPart",
    "ConversationHistory",
    "FileContent",
    "FunctionResult",
    "ImageContent",
    "LiteLLMSession",
    "LlmErrorKind",
    "LlmResponse",
    "LlmSession",
    "LlmTransportError",
    "ModelConfig",
    "TextContent",
    "ToolCall",
    "TurnContent",
    "classify_llm_error",
]
