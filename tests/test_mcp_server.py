# tests/test_mcp_server.py

from __future__ import annotations

import json
from contextlib import asynccontextmanager

import anyio
import mcp.types as types
import pytest
from mcp.client.session import ClientSession
from mcp.shared.exceptions import McpError

from taskmaster.server import mcp_server
from taskmaster.server.mcp_server import SERVER_NAME, build_mcp_server
from taskmaster.server.tools import ToolDispatcher


def _call_request(name: str, arguments: dict | None = None) -> types.CallToolRequest:
    return types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )


def test_server_identity(dispatcher: ToolDispatcher) -> None:
    server = build_mcp_server(dispatcher)
    assert server.name == SERVER_NAME == "task-master-mcp"
    assert types.ListToolsRequest in server.request_handlers
    assert types.CallToolRequest in server.request_handlers


@pytest.mark.asyncio
async def test_tools_list_exposes_the_table(dispatcher: ToolDispatcher) -> None:
    server = build_mcp_server(dispatcher)
    handler = server.request_handlers[types.ListToolsRequest]

    result = await handler(types.ListToolsRequest(method="tools/list"))

    tools = result.root.tools
    assert [t.name for t in tools] == [t.name for t in dispatcher.list_tools()]
    create = next(t for t in tools if t.name == "createTask")
    assert create.inputSchema["required"] == ["description"]


@pytest.mark.asyncio
async def test_tools_call_returns_text_content(dispatcher: ToolDispatcher) -> None:
    server = build_mcp_server(dispatcher)
    handler = server.request_handlers[types.CallToolRequest]

    result = await handler(_call_request("listTasks", {"status": "pending"}))

    content = result.root.content
    assert len(content) == 1
    assert content[0].type == "text"
    assert [t["id"] for t in json.loads(content[0].text)] == [3]


@pytest.mark.asyncio
async def test_tools_call_without_arguments(dispatcher: ToolDispatcher) -> None:
    server = build_mcp_server(dispatcher)
    handler = server.request_handlers[types.CallToolRequest]

    result = await handler(_call_request("getTaskRecommendations"))
    assert result.root.content[0].text.startswith("AI-Powered Task Recommendations:")


@pytest.mark.asyncio
async def test_tools_call_propagates_mcp_errors(dispatcher: ToolDispatcher) -> None:
    server = build_mcp_server(dispatcher)
    handler = server.request_handlers[types.CallToolRequest]

    with pytest.raises(McpError) as excinfo:
        await handler(_call_request("nope", {}))
    assert excinfo.value.error.code == types.METHOD_NOT_FOUND


@pytest.mark.asyncio
async def test_run_stdio_serves_a_client_session(
    dispatcher: ToolDispatcher, monkeypatch: pytest.MonkeyPatch
) -> None:
    client_send, server_recv = anyio.create_memory_object_stream(16)
    server_send, client_recv = anyio.create_memory_object_stream(16)

    @asynccontextmanager
    async def _memory_stdio():
        yield server_recv, server_send

    monkeypatch.setattr(mcp_server, "stdio_server", _memory_stdio)

    with anyio.fail_after(10):
        async with anyio.create_task_group() as tg:
            tg.start_soon(mcp_server.run_stdio, dispatcher)

            async with ClientSession(client_recv, client_send) as session:
                await session.initialize()

                listed = await session.list_tools()
                assert [t.name for t in listed.tools] == [t.name for t in dispatcher.list_tools()]

                created = await session.call_tool("createTask", {"description": "ship it"})
                assert created.content[0].text.startswith("Task created successfully: ")

                with pytest.raises(McpError) as excinfo:
                    await session.call_tool("createTask", {})
                assert excinfo.value.error.code == types.INVALID_PARAMS

            # EOF on the client side ends the server loop.
            await client_send.aclose()
