# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskmaster.cli.bootstrap import create_initial_state
from taskmaster.core.state import AppState
from taskmaster.llm.assistant import GenerationTaskAssistant
from taskmaster.server.tools import ToolDispatcher
from taskmaster.tasks.task_store import TaskStore

from .fakes import FakeClock, FakeGenerator


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the HTTP app.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment and .env.
    """
    return SimpleNamespace(
        app_name="task-master-mcp",
        app_version="1.0.0",
        llm_model="fake-model",
        http_host="127.0.0.1",
        http_port=3000,
        static_dir=tmp_path / "public",
        seed_sample_tasks=True,
    )


@pytest.fixture()
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(generator: FakeGenerator, clock: FakeClock) -> TaskStore:
    """Store seeded with the three sample tasks (ids 1-3: done/started/pending)."""
    s = TaskStore(GenerationTaskAssistant(generator), clock=clock)
    s.seed_samples()
    return s


@pytest.fixture()
def dispatcher(store: TaskStore) -> ToolDispatcher:
    return ToolDispatcher(store)


@pytest.fixture()
def state(settings: SimpleNamespace, generator: FakeGenerator) -> AppState:
    return create_initial_state(settings=settings, generator=generator)
