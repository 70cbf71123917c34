# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskmaster.cli.bootstrap import require_configured
from taskmaster.cli.main import create_parser
from taskmaster.config import DEFAULT_API_BASE_URL, DEFAULT_LLM_MODEL, Settings

_VARS = (
    "TASKMASTER_API_KEY",
    "GEMINI_API_KEY",
    "TASKMASTER_API_BASE_URL",
    "TASK_MANAGER_API_BASE_URL",
    "TASKMASTER_HTTP_PORT",
    "TASK_MANAGER_HTTP_PORT",
    "PORT",
    "TASKMASTER_LLM_MODEL",
    "TASKMASTER_LLM_TOP_K",
    "TASKMASTER_SEED_SAMPLE_TASKS",
    "TASKMASTER_STATIC_DIR",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s.api_key is None
    assert s.api_base_url == DEFAULT_API_BASE_URL
    assert s.llm_model == DEFAULT_LLM_MODEL
    assert s.http_port == 3000
    assert s.llm_top_k == 40
    assert s.static_dir == Path("public")
    assert s.seed_sample_tasks is True
    assert s.missing_required() == ["GEMINI_API_KEY"]


def test_gemini_key_alias(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "  from-gemini  ")
    assert Settings.from_env().api_key == "from-gemini"

    monkeypatch.setenv("TASKMASTER_API_KEY", "from-project")
    s = Settings.from_env()
    assert s.api_key == "from-project"
    assert s.missing_required() == []


def test_blank_key_counts_as_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "   ")
    assert Settings.from_env().missing_required() == ["GEMINI_API_KEY"]


def test_port_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "8080")
    assert Settings.from_env().http_port == 8080

    monkeypatch.setenv("TASK_MANAGER_HTTP_PORT", "9090")
    assert Settings.from_env().http_port == 9090

    monkeypatch.setenv("TASKMASTER_HTTP_PORT", "7070")
    assert Settings.from_env().http_port == 7070


def test_invalid_numbers_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "not-a-port")
    monkeypatch.setenv("TASKMASTER_LLM_TOP_K", "lots")
    s = Settings.from_env()
    assert s.http_port == 3000
    assert s.llm_top_k == 40


def test_seeding_can_be_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKMASTER_SEED_SAMPLE_TASKS", "false")
    assert Settings.from_env().seed_sample_tasks is False


def test_require_configured_exits_with_diagnostic(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        require_configured(Settings.from_env())

    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert "Error: Missing required environment variable: GEMINI_API_KEY" in captured.err
    assert captured.out == ""


def test_require_configured_passes_when_key_set(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "k")
    require_configured(Settings.from_env())


def test_parser_defaults_to_stdio() -> None:
    args = create_parser().parse_args([])
    assert args.transport == "stdio"
    assert args.port is None

    args = create_parser().parse_args(["http", "--port", "4000"])
    assert args.transport == "http"
    assert args.port == 4000
