# src/taskmaster/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- checks required configuration (fail fast, before any transport starts),
- wires concrete implementations into AppState (generator/assistant/store/dispatcher).
"""

from __future__ import annotations

import logging
import sys

from ..config import Settings, get_settings
from ..core.ports import TextGenerator
from ..core.state import AppState
from ..llm.assistant import GenerationTaskAssistant
from ..llm.client import OpenAICompatibleGenerator
from ..server.tools import ToolDispatcher
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def require_configured(settings: Settings) -> None:
    """Exit with status 1 and a stderr diagnostic if a required variable is missing."""
    missing = settings.missing_required()
    if not missing:
        return
    for name in missing:
        print(f"Error: Missing required environment variable: {name}", file=sys.stderr)
    raise SystemExit(1)


def create_initial_state(*, settings=None, generator: TextGenerator | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the generator) injectable makes the app easier to test and
    avoids hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if generator is None:
        generator = OpenAICompatibleGenerator(settings)

    assistant = GenerationTaskAssistant(generator)
    store = TaskStore(assistant)
    if settings.seed_sample_tasks:
        store.seed_samples()

    state = AppState(
        settings=settings,
        generator=generator,
        assistant=assistant,
        store=store,
        dispatcher=ToolDispatcher(store),
    )
    logger.info("State ready: model=%s tasks=%d", settings.llm_model, len(store))
    return state
