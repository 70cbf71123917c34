# src/taskmaster/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (entry points validate before serving).
- Legacy TASK_MANAGER_* and bare PORT/GEMINI_API_KEY names keep working as aliases.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKMASTER"

DEFAULT_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_LLM_MODEL = "gemini-2.0-flash"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _to_int(raw: str | None, default: int) -> int:
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    app_version: str
    log_level: str
    data_dir: Path

    # ---- Generation endpoint ----
    api_key: str | None
    api_base_url: str
    llm_model: str
    llm_timeout_seconds: float
    llm_connect_timeout_seconds: float
    llm_max_output_tokens: int
    llm_top_p: float
    llm_top_k: int

    # ---- HTTP transport ----
    http_host: str
    http_port: int
    static_dir: Path

    # ---- Task store ----
    seed_sample_tasks: bool

    @staticmethod
    def from_env() -> "Settings":
        api_key = _first_env(_k("API_KEY"), "GEMINI_API_KEY", default=None)
        api_base_url = (
            _first_env(_k("API_BASE_URL"), "TASK_MANAGER_API_BASE_URL", default=DEFAULT_API_BASE_URL)
            or DEFAULT_API_BASE_URL
        )

        # Project var first, then the legacy name, then bare PORT.
        http_port = _to_int(
            _first_env(_k("HTTP_PORT"), "TASK_MANAGER_HTTP_PORT", "PORT", default=None),
            3000,
        )

        return Settings(
            app_name=_env(_k("APP_NAME"), "task-master-mcp"),
            app_version="1.0.0",
            log_level=_env(_k("LOG_LEVEL"), "INFO"),
            data_dir=_env_path(_k("DATA_DIR"), Path(".local/taskmaster")),
            api_key=api_key.strip() if api_key else None,
            api_base_url=api_base_url.strip(),
            llm_model=_env(_k("LLM_MODEL"), DEFAULT_LLM_MODEL).strip() or DEFAULT_LLM_MODEL,
            llm_timeout_seconds=_env_float(_k("LLM_TIMEOUT_SECONDS"), 30.0),
            llm_connect_timeout_seconds=_env_float(_k("LLM_CONNECT_TIMEOUT_SECONDS"), 5.0),
            llm_max_output_tokens=_to_int(os.getenv(_k("LLM_MAX_OUTPUT_TOKENS")), 1024),
            llm_top_p=_env_float(_k("LLM_TOP_P"), 0.95),
            llm_top_k=_to_int(os.getenv(_k("LLM_TOP_K")), 40),
            http_host=_env(_k("HTTP_HOST"), "0.0.0.0"),
            http_port=http_port,
            static_dir=_env_path(_k("STATIC_DIR"), Path("public")),
            seed_sample_tasks=_env_bool(_k("SEED_SAMPLE_TASKS"), True),
        )

    def missing_required(self) -> list[str]:
        """Names of required variables that are not set (empty list when ready to serve)."""
        missing: list[str] = []
        if not self.api_key:
            missing.append("GEMINI_API_KEY")
        return missing


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
