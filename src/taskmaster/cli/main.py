# src/taskmaster/cli/main.py

"""
CLI entrypoint.

Loads settings, initializes logging, validates configuration, builds AppState,
then serves the task tools over one transport:
- stdio (default): MCP JSON-RPC on stdin/stdout,
- http: MCP over SSE plus the JSON endpoints, via uvicorn.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
from collections.abc import Sequence
from dataclasses import replace

from ..config import get_settings
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..server.http_app import run_http
from ..server.mcp_server import run_stdio
from .bootstrap import create_initial_state, require_configured

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskmaster",
        description="Task Master MCP server: AI-assisted task tracking over MCP (stdio or HTTP/SSE).",
    )
    parser.add_argument(
        "transport",
        nargs="?",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport to serve (default: stdio)",
    )
    parser.add_argument("--port", type=int, default=None, help="HTTP port (overrides TASKMASTER_HTTP_PORT)")
    return parser


async def _serve(state: AppState, transport: str) -> None:
    try:
        if transport == "http":
            await run_http(state)
        else:
            await run_stdio(state.dispatcher)
    finally:
        aclose = getattr(state.generator, "aclose", None)
        if callable(aclose):
            try:
                await aclose()
            except Exception:
                logger.debug("Generator close failed.", exc_info=True)


def main(argv: Sequence[str] | None = None) -> None:
    args = create_parser().parse_args(argv)
    settings = get_settings()
    if args.port is not None:
        settings = replace(settings, http_port=args.port)

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    require_configured(settings)

    logger.info("Starting %s %s (%s)...", settings.app_name, settings.app_version, args.transport)
    state = create_initial_state(settings=settings)

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_serve(state, args.transport))
    logger.info("Bye.")


def main_stdio() -> None:
    main(["stdio"])


def main_http() -> None:
    main(["http"])


if __name__ == "__main__":
    main()
