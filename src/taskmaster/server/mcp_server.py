# src/taskmaster/server/mcp_server.py

"""
MCP protocol wiring shared by both transports, and the stdio transport itself.

tools/call is registered as a raw request handler (not via the call_tool
decorator) so an McpError raised by the dispatcher reaches the client as a
JSON-RPC error with its code, instead of being folded into an isError result.
"""

from __future__ import annotations

import logging

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from .tools import ToolDispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "task-master-mcp"
SERVER_VERSION = "1.0.0"


def build_mcp_server(
    dispatcher: ToolDispatcher,
    *,
    name: str = SERVER_NAME,
    version: str = SERVER_VERSION,
) -> Server:
    server: Server = Server(name, version=version)

    @server.list_tools()
    async def _list_tools() -> list[types.Tool]:
        return [
            types.Tool(name=t.name, description=t.description, inputSchema=t.input_schema)
            for t in dispatcher.list_tools()
        ]

    async def _call_tool(req: types.CallToolRequest) -> types.ServerResult:
        name = req.params.name
        logger.info("tools/call name=%s", name)
        text = await dispatcher.call(name, req.params.arguments or {})
        return types.ServerResult(types.CallToolResult(content=[types.TextContent(type="text", text=text)]))

    server.request_handlers[types.CallToolRequest] = _call_tool
    return server


async def run_stdio(dispatcher: ToolDispatcher) -> None:
    """Serve line-delimited JSON-RPC on stdin/stdout until the client hangs up."""
    server = build_mcp_server(dispatcher)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Task Master MCP server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())
    logger.info("stdio session closed")
