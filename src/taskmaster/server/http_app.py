# src/taskmaster/server/http_app.py

"""
HTTP transport.

- GET  /mcp             MCP over Server-Sent Events (one MCP session per stream)
- POST /messages/       client -> server messages for an SSE session
- GET  /health, /stats, /analysis, /recommendations   plain JSON
- GET  /                landing page

The JSON endpoints never leak error details: they log the exception and
answer 500 with a generic body.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from string import Template

import uvicorn
from mcp.server.sse import SseServerTransport
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, Response
from starlette.routing import Mount, Route
from starlette.staticfiles import StaticFiles

from ..core.state import AppState
from ..tasks.task_models import format_timestamp
from .mcp_server import build_mcp_server

logger = logging.getLogger(__name__)

MCP_SSE_PATH = "/mcp"
MCP_MESSAGES_PATH = "/messages/"

LANDING_PAGE = Template("""<!DOCTYPE html>
<html>
<head>
  <title>Task Master MCP Server</title>
  <style>
    body { font-family: Arial, sans-serif; margin: 40px; }
    .container { max-width: 800px; margin: 0 auto; }
    .endpoint { background: #f5f5f5; padding: 15px; margin: 10px 0; border-radius: 5px; }
    .status { color: #28a745; }
    .method { color: #007bff; font-weight: bold; }
  </style>
</head>
<body>
  <div class="container">
    <h1>Task Master MCP Server</h1>
    <p class="status">Server is running on port $port</p>

    <h2>Available Endpoints</h2>
    <div class="endpoint"><span class="method">GET</span> <code>/health</code><p>Health check endpoint</p></div>
    <div class="endpoint"><span class="method">GET</span> <code>/stats</code><p>Get task statistics</p></div>
    <div class="endpoint"><span class="method">GET</span> <code>/analysis</code><p>Get AI-powered task analysis with summary and recommendations</p></div>
    <div class="endpoint"><span class="method">GET</span> <code>/recommendations</code><p>Get AI-powered task recommendations</p></div>
    <div class="endpoint"><span class="method">GET</span> <code>$sse_path</code><p>MCP Server-Sent Events endpoint for AI clients</p></div>

    <h2>Available Tools</h2>
    <ul>
$tools
    </ul>

    <h2>Integration</h2>
    <p>To connect an AI client, use the MCP endpoint: <code>http://localhost:$port$sse_path</code></p>
  </div>
</body>
</html>
""")


def render_landing_page(state: AppState) -> str:
    tools = "\n".join(
        f"      <li><strong>{t.name}</strong> - {t.description}</li>" for t in state.dispatcher.list_tools()
    )
    return LANDING_PAGE.substitute(port=state.settings.http_port, sse_path=MCP_SSE_PATH, tools=tools)


def create_app(state: AppState) -> Starlette:
    store = state.store
    mcp_server = build_mcp_server(
        state.dispatcher,
        name=state.settings.app_name,
        version=state.settings.app_version,
    )
    sse = SseServerTransport(MCP_MESSAGES_PATH)

    async def handle_sse(request: Request) -> Response:
        logger.info("SSE session opened from %s", request.client.host if request.client else "?")
        async with sse.connect_sse(request.scope, request.receive, request._send) as (read_stream, write_stream):
            await mcp_server.run(read_stream, write_stream, mcp_server.create_initialization_options())
        logger.info("SSE session closed")
        return Response()

    async def health(request: Request) -> JSONResponse:
        return JSONResponse({"status": "healthy", "timestamp": format_timestamp(datetime.now(UTC))})

    async def stats(request: Request) -> JSONResponse:
        try:
            return JSONResponse(store.stats())
        except Exception:
            logger.exception("GET /stats failed")
            return JSONResponse({"error": "Failed to get task statistics"}, status_code=500)

    async def analysis(request: Request) -> JSONResponse:
        try:
            return JSONResponse(await store.analysis())
        except Exception:
            logger.exception("GET /analysis failed")
            return JSONResponse({"error": "Failed to get task analysis"}, status_code=500)

    async def recommendations(request: Request) -> JSONResponse:
        try:
            return JSONResponse({"recommendations": await store.recommendations()})
        except Exception:
            logger.exception("GET /recommendations failed")
            return JSONResponse({"error": "Failed to get task recommendations"}, status_code=500)

    async def index(request: Request) -> HTMLResponse:
        return HTMLResponse(render_landing_page(state))

    routes = [
        Route("/", endpoint=index, methods=["GET"]),
        Route("/health", endpoint=health, methods=["GET"]),
        Route("/stats", endpoint=stats, methods=["GET"]),
        Route("/analysis", endpoint=analysis, methods=["GET"]),
        Route("/recommendations", endpoint=recommendations, methods=["GET"]),
        Route(MCP_SSE_PATH, endpoint=handle_sse, methods=["GET"]),
        Mount(MCP_MESSAGES_PATH, app=sse.handle_post_message),
    ]

    static_dir = state.settings.static_dir
    if static_dir.is_dir():
        routes.append(Mount("/static", app=StaticFiles(directory=str(static_dir)), name="static"))
        logger.info("Serving static files from %s", static_dir)

    return Starlette(
        routes=routes,
        middleware=[Middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])],
    )


async def run_http(state: AppState) -> None:
    settings = state.settings
    app = create_app(state)
    # log_config=None: keep the handlers installed by setup_logging()
    config = uvicorn.Config(app, host=settings.http_host, port=settings.http_port, log_config=None)
    server = uvicorn.Server(config)

    logger.info("Task Master MCP HTTP server running on port %s", settings.http_port)
    logger.info("MCP endpoint: http://localhost:%s%s", settings.http_port, MCP_SSE_PATH)
    await server.serve()
