"""MCP stdio server exposing the mdsel tools."""

from __future__ import annotations

import logging
from typing import Any

import mcp.server
import mcp.server.stdio
import mcp.types
from mcp.server.lowlevel import NotificationOptions
from mcp.server.models import InitializationOptions

from mdsel_claude import __version__
from mdsel_claude.config import Config
from mdsel_claude.executor import MdselExecutor
from mdsel_claude.tools.mdsel import build_registry
from mdsel_claude.tools.registry import ToolRegistry
from mdsel_claude.types import ToolResponse

logger = logging.getLogger(__name__)

SERVER_NAME = "mdsel-claude"


def list_tools(registry: ToolRegistry) -> list[mcp.types.Tool]:
    return [
        mcp.types.Tool(
            name=d.name,
            description=d.description,
            inputSchema=d.parameters,
        )
        for d in registry.definitions()
    ]


def to_call_tool_result(response: ToolResponse) -> mcp.types.CallToolResult:
    return mcp.types.CallToolResult(
        content=[mcp.types.TextContent(type="text", text=c.text) for c in response.content],
        isError=response.is_error,
    )


async def call_tool(
    registry: ToolRegistry, name: str, arguments: dict[str, Any] | None
) -> mcp.types.CallToolResult:
    response = await registry.execute(name, arguments)
    if response.is_error:
        logger.info("tool %s returned an error", name)
    return to_call_tool_result(response)


def create_server(registry: ToolRegistry) -> mcp.server.Server:
    """Build a low-level MCP server routing tools/list and tools/call to ``registry``."""
    server = mcp.server.Server(SERVER_NAME)

    @server.list_tools()
    async def handle_list_tools() -> list[mcp.types.Tool]:
        return list_tools(registry)

    # the registry does its own argument validation
    @server.call_tool(validate_input=False)
    async def handle_call_tool(
        name: str, arguments: dict[str, Any]
    ) -> mcp.types.CallToolResult:
        return await call_tool(registry, name, arguments)

    return server


def initialization_options(server: mcp.server.Server) -> InitializationOptions:
    return InitializationOptions(
        server_name=server.name,
        server_version=__version__,
        capabilities=server.get_capabilities(
            notification_options=NotificationOptions(),
            experimental_capabilities={},
        ),
    )


async def serve_stdio(config: Config) -> None:
    """Run the MCP server over stdin/stdout until the client disconnects."""
    server = create_server(build_registry(MdselExecutor.from_config(config)))
    logger.info("starting %s over stdio (mdsel=%s)", SERVER_NAME, config.mdsel_path)
    async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, initialization_options(server))
