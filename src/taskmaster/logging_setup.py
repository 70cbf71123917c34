# src/taskmaster/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable while a server is running:
    - allow all taskmaster logs
    - allow uvicorn lifecycle messages, but access lines only at WARNING+
    - MCP SDK internals only at WARNING+
    - suppress Python warnings (captured as 'py.warnings') unless ERROR+
    - any other third-party logger only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith("taskmaster."):
            return True

        if name == "uvicorn.access":
            return record.levelno >= logging.WARNING
        if name == "uvicorn" or name.startswith("uvicorn."):
            return True

        if name == "mcp" or name.startswith("mcp."):
            return record.levelno >= logging.WARNING

        if name == "py.warnings":
            return record.levelno >= logging.ERROR

        return record.levelno >= logging.ERROR


LOG_FILE_NAME = "taskmaster.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

QUIET_LOGGERS = ("httpx", "httpcore", "openai")


def _console_handler(level: int, formatter: logging.Formatter) -> logging.Handler:
    # stderr only: under the stdio transport stdout carries JSON-RPC frames.
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(_ConsoleNoiseFilter())
    return handler


def _file_handler(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskmaster",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route all logging to a filtered stderr console and a full debug file.

    Replaces whatever handlers the root logger had, so calling it twice does not
    duplicate output. Returns the log file path.
    """
    log_file = Path(log_dir) / LOG_FILE_NAME
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
        old.close()

    root.setLevel(min(console_level, file_level))
    root.addHandler(_console_handler(console_level, formatter))
    root.addHandler(_file_handler(log_file, file_level, formatter))

    logging.captureWarnings(True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
