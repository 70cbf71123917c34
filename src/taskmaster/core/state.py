# src/taskmaster/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..tasks.task_store import TaskStore
from .ports import TaskAssistant, TextGenerator

if TYPE_CHECKING:
    from ..server.tools import ToolDispatcher


@dataclass
class AppState:
    # Settings-like object (real Settings, or a SimpleNamespace in tests).
    settings: Any

    generator: TextGenerator
    assistant: TaskAssistant
    store: TaskStore
    dispatcher: ToolDispatcher
