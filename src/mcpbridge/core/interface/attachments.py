"""Attachment encoding — local files to message content parts."""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from mcpbridge.core.interface.models import (
    AudioContent,
    ContentPart,
    FileContent,
    ImageContent,
    TextContent,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

MIME_TYPES: dict[str, str] = {
    "txt": "text/plain",
    "json": "application/json",
    "xml": "application/xml",
    "csv": "text/csv",
    "md": "text/markdown",
    "html": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "ts": "application/typescript",
    "py": "text/x-python",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "heic": "image/heic",
    "heif": "image/heif",
    "wav": "audio/wav",
    "mp3": "audio/mpeg",
    "ogg": "audio/ogg",
    "pdf": "application/pdf",
}

_TEXT_APPLICATION_TYPES = frozenset(
    {"application/json", "application/xml", "application/javascript", "application/typescript"}
)


def determine_mime_type(filename: str) -> str:
    """Guess a MIME type from the file extension."""
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return MIME_TYPES.get(extension, "application/octet-stream")


def encode_attachment(path: str | Path) -> ContentPart:
    """Read *path* and wrap it as a content part.

    Text-like files are inlined as text with a header naming the file;
    everything else is base64 encoded.
    """
    file_path = Path(path)
    media_type = determine_mime_type(file_path.name)
    raw = file_path.read_bytes()

    if media_type.startswith("text/") or media_type in _TEXT_APPLICATION_TYPES:
        body = raw.decode("utf-8", errors="replace")
        return TextContent(text=f"--- File: {file_path.name} ({media_type}) ---\n{body}")

    data = base64.b64encode(raw).decode("ascii")
    if media_type.startswith("image/"):
        return ImageContent(data=data, media_type=media_type)
    if media_type.startswith("audio/"):
        return AudioContent(data=data, media_type=media_type)
    return FileContent(data=data, media_type=media_type, filename=file_path.name)


def build_user_content(text: str, attachments: Iterable[str | Path] = ()) -> str | list[ContentPart]:
    """Combine typed text and attached files into one user message.

    Returns plain text when nothing is attached.  Files that cannot be read
    are logged and left out.
    """
    parts: list[ContentPart] = []
    for path in attachments:
        try:
            parts.append(encode_attachment(path))
        except OSError as exc:
            logger.warning("Could not read attachment %s: %s", path, exc)
    if not parts:
        return text
    if text:
        parts.insert(0, TextContent(text=text))
    return parts
