"""Tests for registry models."""

from __future__ import annotations

from mcpbridge.core.registry.models import Registry, ToolMapping
from mcpbridge.core.schema.models import FunctionDeclaration, ParamSchema, SchemaType


def _mapping(name: str) -> ToolMapping:
    return ToolMapping(
        declaration=FunctionDeclaration(
            name=name,
            description=f"{name} tool",
            parameters=ParamSchema(type=SchemaType.OBJECT, properties={}),
        ),
        server_name="srv",
        server_url="http://srv.test/mcp",
        provider_tool_name=name,
    )


class TestRegistry:
    def test_lookup(self) -> None:
        registry = Registry(mappings=(_mapping("a"), _mapping("b")))
        assert registry.get("b") is registry.mappings[1]
        assert registry.get("missing") is None
        assert "a" in registry
        assert "missing" not in registry

    def test_order_preserved(self) -> None:
        registry = Registry(mappings=(_mapping("z"), _mapping("a")))
        assert registry.names() == ["z", "a"]
        assert [d.name for d in registry.declarations()] == ["z", "a"]
        assert [m.name for m in registry] == ["z", "a"]

    def test_empty(self) -> None:
        registry = Registry()
        assert len(registry) == 0
        assert registry.declarations() == []
