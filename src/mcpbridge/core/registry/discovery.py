"""DiscoveryCoordinator — builds a fresh registry from configured servers.

Servers are visited one at a time in configuration order, so when two tools
derive the same function name the one from the earlier server (or earlier
in a server's listing) always wins.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Iterable, Sequence
from typing import TYPE_CHECKING, TypeVar

from mcpbridge.core.registry.models import DiscoveryResult, Registry, ServerDescriptor, ToolMapping
from mcpbridge.core.registry.naming import derive_function_name
from mcpbridge.core.schema.models import FunctionDeclaration, SchemaType
from mcpbridge.core.schema.translator import translate_schema
from mcpbridge.utils.telemetry import (
    ATTR_MAPPED_TOOLS,
    ATTR_SERVER_COUNT,
    ATTR_SERVER_NAME,
    ATTR_SERVER_URL,
    get_tracer,
)

if TYPE_CHECKING:
    from mcpbridge.protocols.mcp.models import RawToolDescriptor
    from mcpbridge.protocols.provider import ToolProviderConnection, ToolProviderConnector

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

T = TypeVar("T")


def build_declaration(tool: RawToolDescriptor, server_name: str) -> FunctionDeclaration | None:
    """Translate one provider tool into a function declaration.

    Returns ``None`` (logged) for boolean input schemas and for schemas whose
    root type is not ``"object"``.
    """
    schema = tool.input_schema
    if isinstance(schema, bool):
        logger.warning(
            "[Tool Xlate] Tool %r from server %r has a boolean inputSchema; skipping",
            tool.name,
            server_name,
        )
        return None
    if schema.get("type") != "object":
        logger.warning(
            "[Tool Xlate] Tool %r from server %r has inputSchema type %r instead of "
            "'object'; skipping",
            tool.name,
            server_name,
            schema.get("type"),
        )
        return None

    parameters = translate_schema(schema, root=True)
    if parameters is None or parameters.type is not SchemaType.OBJECT:
        logger.warning(
            "[Tool Xlate] Could not translate inputSchema for tool %r from server %r",
            tool.name,
            server_name,
        )
        return None

    description = tool.description
    if not description:
        title = tool.annotations.title if tool.annotations and tool.annotations.title else ""
        description = f"Calls {tool.name} on MCP server {server_name}. {title}"

    return FunctionDeclaration(
        name=derive_function_name(server_name, tool.name),
        description=description,
        parameters=parameters,
    )


class DiscoveryCoordinator:
    """Sweeps all configured servers and maps their tools to functions.

    Usage::

        coordinator = DiscoveryCoordinator(MCPConnector())
        result = await coordinator.discover(servers)
        session.set_available_functions(result.registry.declarations())
    """

    def __init__(
        self,
        connector: ToolProviderConnector,
        *,
        timeout: float | None = None,
    ) -> None:
        self._connector = connector
        self._timeout = timeout

    async def discover(
        self,
        servers: Sequence[ServerDescriptor],
        current: Iterable[ToolMapping] = (),
    ) -> DiscoveryResult:
        """Run one discovery round.

        *current* mappings are kept at the front of the result and their
        names are reserved, so nothing new can collide with them.  Pass
        nothing for a fresh round.
        """
        carried = tuple(current)
        taken = {m.name for m in carried}
        new_mappings: list[ToolMapping] = []

        with _tracer.start_as_current_span("discovery.round") as span:
            span.set_attribute(ATTR_SERVER_COUNT, len(servers))
            logger.info("Discovering tools from %d configured MCP server(s)", len(servers))

            for server in servers:
                for mapping in await self._discover_server(server):
                    if mapping.name in taken:
                        logger.warning(
                            "Function name %r already exists; skipping duplicate tool %r "
                            "from server %r",
                            mapping.name,
                            mapping.provider_tool_name,
                            server.name,
                        )
                        continue
                    taken.add(mapping.name)
                    new_mappings.append(mapping)

            span.set_attribute(ATTR_MAPPED_TOOLS, len(new_mappings))

        registry = Registry(mappings=carried + tuple(new_mappings))
        logger.info(
            "Tool discovery complete: %d new tool(s) mapped, %d in total",
            len(new_mappings),
            len(registry),
        )
        return DiscoveryResult(registry=registry, new_mappings=tuple(new_mappings))

    async def _discover_server(self, server: ServerDescriptor) -> list[ToolMapping]:
        """Map the tools of one server; any connection failure yields ``[]``."""
        with _tracer.start_as_current_span("discovery.server") as span:
            span.set_attribute(ATTR_SERVER_NAME, server.name)
            span.set_attribute(ATTR_SERVER_URL, server.url)
            logger.info("Checking server %s (%s)", server.name, server.url)

            connection: ToolProviderConnection | None = None
            try:
                connection = await self._bounded(self._connector.connect(server.url))
                tools = await self._bounded(connection.list_tools())
            except Exception as exc:
                logger.warning(
                    "Error connecting or listing tools for server %s: %s", server.name, exc
                )
                return []
            finally:
                if connection is not None:
                    await connection.close()

            if not tools:
                logger.info("No tools found on %s", server.name)
                return []

            logger.info("Found %d tool(s) on %s", len(tools), server.name)
            mappings: list[ToolMapping] = []
            for tool in tools:
                try:
                    declaration = build_declaration(tool, server.name)
                except Exception as exc:
                    logger.warning(
                        "[Tool Xlate] Could not map tool %r from server %r: %s",
                        tool.name,
                        server.name,
                        exc,
                    )
                    continue
                if declaration is None:
                    continue
                logger.debug("Mapped MCP tool %r to function %r", tool.name, declaration.name)
                mappings.append(
                    ToolMapping(
                        declaration=declaration,
                        server_name=server.name,
                        server_url=server.url,
                        provider_tool_name=tool.name,
                    )
                )
            span.set_attribute(ATTR_MAPPED_TOOLS, len(mappings))
            return mappings

    async def _bounded(self, operation: Awaitable[T]) -> T:
        if self._timeout is None:
            return await operation
        return await asyncio.wait_for(operation, self._timeout)
