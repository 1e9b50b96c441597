"""Rendering canonical history into LiteLLM's (OpenAI-style) request format.

LiteLLM accepts ChatML-shaped messages for every provider and adapts them
internally, so a single renderer covers Gemini, OpenAI, Anthropic, etc.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from mcpbridge.core.interface.models import (
    AudioContent,
    CanonicalMessage,
    ContentPart,
    ConversationHistory,
    FileContent,
    ImageContent,
    TextContent,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mcpbridge.core.schema.models import FunctionDeclaration


def render_messages(history: ConversationHistory) -> list[dict[str, Any]]:
    """Convert canonical history to a list of OpenAI-style messages."""
    return [render_message(msg) for msg in history]


def render_tools(declarations: Iterable[FunctionDeclaration]) -> list[dict[str, Any]]:
    """Convert function declarations to an OpenAI-style ``tools`` list."""
    return [declaration.to_openai_tool() for declaration in declarations]


def render_message(msg: CanonicalMessage) -> dict[str, Any]:
    """Convert a single canonical message."""
    result: dict[str, Any] = {"role": msg.role}

    if msg.role == "tool":
        result["tool_call_id"] = msg.tool_call_id
        if msg.name:
            result["name"] = msg.name
        result["content"] = msg.text
        return result

    # Plain text stays a string; anything multimodal becomes a part list
    if len(msg.content) == 1 and isinstance(msg.content[0], TextContent):
        result["content"] = msg.content[0].text
    elif msg.content:
        result["content"] = [_render_part(p) for p in msg.content]
    else:
        result["content"] = None

    if msg.tool_calls:
        result["tool_calls"] = [
            {
                "id": tc.id,
                "type": "function",
                "function": {
                    "name": tc.name,
                    "arguments": json.dumps(tc.arguments),
                },
            }
            for tc in msg.tool_calls
        ]

    return result


def _render_part(part: ContentPart) -> dict[str, Any]:
    if isinstance(part, TextContent):
        return {"type": "text", "text": part.text}
    if isinstance(part, ImageContent):
        url = part.url
        if part.data and part.media_type:
            url = f"data:{part.media_type};base64,{part.data}"
        return {"type": "image_url", "image_url": {"url": url}}
    if isinstance(part, FileContent):
        return {
            "type": "file",
            "file": {"file_data": f"data:{part.media_type};base64,{part.data}"},
        }
    audio: AudioContent = part
    return {
        "type": "input_audio",
        "input_audio": {
            "data": audio.data or "",
            "format": _audio_format(audio.media_type),
        },
    }


def _audio_format(media_type: str | None) -> str:
    """Extract audio format from media type."""
    if media_type and "/" in media_type:
        return media_type.split("/")[1]
    return "wav"


def parse_arguments(raw: Any) -> dict[str, Any]:
    """Parse tool-call arguments, which providers send as a JSON string."""
    if isinstance(raw, dict):
        return raw
    try:
        result: Any = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return {"raw": raw}
    return result if isinstance(result, dict) else {"value": result}
