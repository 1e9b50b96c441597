"""Pydantic models for mcpbridge settings and the chat transcript."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, Field

from mcpbridge.core.interface.config import ModelConfig
from mcpbridge.core.interface.models import ContentPart
from mcpbridge.core.orchestration.models import DEFAULT_MAX_ATTEMPTS

HOME_ENV_VAR = "MCPBRIDGE_HOME"


def default_home() -> Path:
    """Directory holding ``settings.yaml`` and ``servers.yaml``."""
    override = os.environ.get(HOME_ENV_VAR)
    return Path(override).expanduser() if override else Path.home() / ".mcpbridge"


class TelemetrySettings(BaseModel):
    """Optional telemetry configuration."""

    enabled: bool = False
    console: bool = False
    otlp_endpoint: str | None = None


class BridgeSettings(BaseModel):
    """Top-level settings, usually read from ``settings.yaml``."""

    model: ModelConfig = Field(default_factory=ModelConfig)
    max_attempts: int = Field(default=DEFAULT_MAX_ATTEMPTS, ge=1)
    network_timeout: float | None = Field(default=60.0, gt=0)
    servers_path: Path | None = None
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)

    def resolved_servers_path(self) -> Path:
        return self.servers_path or default_home() / "servers.yaml"


class ToolCallInfo(BaseModel):
    """Tool-call details attached to a transcript message."""

    name: str
    arguments: dict[str, Any] = {}
    status: Literal["pending", "success", "error"] = "pending"
    result: Any = None


class ChatMessage(BaseModel):
    """One entry of the user-facing transcript."""

    id: str = Field(default_factory=lambda: f"msg-{uuid4().hex[:12]}")
    role: Literal["user", "assistant", "system", "tool"]
    content: str
    parts: list[ContentPart] | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    tool_call: ToolCallInfo | None = None
    is_error: bool = False
