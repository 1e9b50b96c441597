"""Registry models — servers, tool mappings, and the registry itself."""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict

from mcpbridge.core.schema.models import FunctionDeclaration


class ServerDescriptor(BaseModel):
    """A configured tool-provider server."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    is_default: bool = False


class ToolMapping(BaseModel):
    """Links a function declaration back to the tool that implements it."""

    model_config = ConfigDict(frozen=True)

    declaration: FunctionDeclaration
    server_name: str
    server_url: str
    provider_tool_name: str

    @property
    def name(self) -> str:
        return self.declaration.name


class Registry(BaseModel):
    """Ordered, deduplicated set of tool mappings.

    Discovery builds a new registry each round; nothing mutates one in place.
    """

    model_config = ConfigDict(frozen=True)

    mappings: tuple[ToolMapping, ...] = ()

    def get(self, name: str) -> ToolMapping | None:
        """Return the mapping whose declaration is called *name*."""
        return next((m for m in self.mappings if m.name == name), None)

    def names(self) -> list[str]:
        return [m.name for m in self.mappings]

    def declarations(self) -> list[FunctionDeclaration]:
        return [m.declaration for m in self.mappings]

    def __contains__(self, name: object) -> bool:
        return any(m.name == name for m in self.mappings)

    def __len__(self) -> int:
        return len(self.mappings)

    def __iter__(self) -> Iterator[ToolMapping]:  # type: ignore[override]
        return iter(self.mappings)


class DiscoveryResult(BaseModel):
    """Outcome of one discovery round."""

    model_config = ConfigDict(frozen=True)

    registry: Registry
    new_mappings: tuple[ToolMapping, ...] = ()
