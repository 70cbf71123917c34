# tests/test_http_app.py

from __future__ import annotations

import asyncio
import json
import socket
from pathlib import Path

import pytest
import uvicorn
from mcp.client.session import ClientSession
from mcp.client.sse import sse_client
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR
from starlette.testclient import TestClient

from taskmaster.cli.bootstrap import create_initial_state
from taskmaster.core.state import AppState
from taskmaster.llm.client import GenerationError
from taskmaster.server.http_app import MCP_SSE_PATH, create_app

from .fakes import FakeGenerator


@pytest.fixture()
def client(state: AppState) -> TestClient:
    return TestClient(create_app(state))


def test_health(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["timestamp"].endswith("Z")


def test_stats_reflect_seeded_tasks(client: TestClient) -> None:
    resp = client.get("/stats")
    assert resp.status_code == 200
    assert resp.json() == {"total": 3, "pending": 1, "started": 1, "done": 1}


def test_analysis_and_recommendations(client: TestClient) -> None:
    analysis = client.get("/analysis").json()
    assert analysis == {"summary": "3 tasks, one done.", "nextActions": ["Finish the docs", "Review open changes"]}

    recommendations = client.get("/recommendations").json()
    assert recommendations == {"recommendations": ["Finish the docs", "Review open changes"]}


def test_endpoints_fall_back_when_generation_fails(settings) -> None:
    state = create_initial_state(settings=settings, generator=FakeGenerator(error=GenerationError("down")))
    client = TestClient(create_app(state))

    assert client.get("/analysis").json()["summary"] == "Unable to generate task summary at this time."
    assert client.get("/recommendations").json()["recommendations"] == [
        "Review current task priorities",
        "Focus on high-priority items",
        "Check for any blockers",
    ]


def test_endpoint_failures_return_generic_500(state: AppState, monkeypatch: pytest.MonkeyPatch) -> None:
    def _explode() -> dict:
        raise RuntimeError("secret internal detail")

    async def _explode_async() -> dict:
        raise RuntimeError("secret internal detail")

    monkeypatch.setattr(state.store, "stats", _explode)
    monkeypatch.setattr(state.store, "analysis", _explode_async)
    monkeypatch.setattr(state.store, "recommendations", _explode_async)
    client = TestClient(create_app(state))

    for path, message in [
        ("/stats", "Failed to get task statistics"),
        ("/analysis", "Failed to get task analysis"),
        ("/recommendations", "Failed to get task recommendations"),
    ]:
        resp = client.get(path)
        assert resp.status_code == 500
        assert resp.json() == {"error": message}
        assert "secret" not in resp.text


def test_landing_page_lists_tools(client: TestClient) -> None:
    resp = client.get("/")
    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]
    assert "Task Master MCP Server" in resp.text
    assert "running on port 3000" in resp.text
    for name in ("listTasks", "createTask", "updateTask", "deleteTask", "getTaskAnalysis", "getTaskRecommendations"):
        assert f"<strong>{name}</strong>" in resp.text


def test_cors_headers(client: TestClient) -> None:
    resp = client.get("/health", headers={"Origin": "http://example.com"})
    assert resp.headers["access-control-allow-origin"] == "*"


def test_static_files_served_when_directory_exists(state: AppState) -> None:
    static_dir: Path = state.settings.static_dir
    static_dir.mkdir(parents=True)
    (static_dir / "hello.txt").write_text("hi", "utf-8")

    client = TestClient(create_app(state))
    resp = client.get("/static/hello.txt")
    assert resp.status_code == 200
    assert resp.text == "hi"


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.mark.asyncio
async def test_mcp_session_over_sse(state: AppState) -> None:
    port = _free_port()
    config = uvicorn.Config(create_app(state), host="127.0.0.1", port=port, log_config=None, lifespan="off")
    server = uvicorn.Server(config)
    serving = asyncio.create_task(server.serve())
    try:
        async with asyncio.timeout(10):
            while not server.started:
                await asyncio.sleep(0.02)

        async with asyncio.timeout(20):
            async with sse_client(f"http://127.0.0.1:{port}{MCP_SSE_PATH}") as (read_stream, write_stream):
                async with ClientSession(read_stream, write_stream) as session:
                    await session.initialize()

                    listed = await session.list_tools()
                    assert len(listed.tools) == 6
                    assert "createTask" in {t.name for t in listed.tools}

                    result = await session.call_tool("listTasks", {"status": "done"})
                    assert [t["id"] for t in json.loads(result.content[0].text)] == [1]

                    with pytest.raises(McpError) as excinfo:
                        await session.call_tool("deleteTask", {"taskId": 99})
                    assert excinfo.value.error.code == INTERNAL_ERROR
                    assert excinfo.value.error.message == (
                        "Error executing tool deleteTask: Task with ID 99 not found"
                    )
    finally:
        server.should_exit = True
        await asyncio.wait_for(serving, 10)

    assert [t.id for t in state.store.list_tasks()] == [1, 2, 3]
