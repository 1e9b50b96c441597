"""Model configuration — which LLM the session talks to, and how."""

from typing import Any

from pydantic import BaseModel, Field

DEFAULT_MODEL = "gemini/gemini-2.5-flash"


class ModelConfig(BaseModel):
    """Configuration for the model backing a chat session.

    The ``model`` field uses LiteLLM's naming convention:
    ``provider/model_name`` (e.g. ``gemini/gemini-2.5-flash``,
    ``openai/gpt-4o``).  ``api_key`` may be omitted when the provider's
    environment variable (``GEMINI_API_KEY``, ``OPENAI_API_KEY``, ...) is set.
    """

    model: str = DEFAULT_MODEL
    api_key: str | None = None
    api_base: str | None = None
    temperature: float | None = 0.7
    system_prompt: str | None = None
    extra: dict[str, Any] = Field(default_factory=lambda: dict[str, Any]())

    @property
    def provider(self) -> str:
        """Extract the provider prefix from the model string."""
        if "/" in self.model:
            return self.model.split("/", 1)[0]
        return "openai"
