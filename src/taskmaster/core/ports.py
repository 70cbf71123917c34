# src/taskmaster/core/ports.py

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete implementations.
This keeps the generation provider swappable and makes testing easier.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from ..tasks.task_models import Task, TaskPriority


class TextGenerator(Protocol):
    """Single-prompt text generation against an external endpoint."""

    async def generate(self, prompt: str, *, temperature: float = 0.7) -> str: ...


class TaskAssistant(Protocol):
    """
    Domain intents backed by a TextGenerator.

    Implementations absorb their own generation failures and return fallback values;
    callers may still guard against unexpected exceptions.
    """

    async def enhance_description(self, text: str) -> str: ...
    async def suggest_category(self, text: str) -> str: ...
    async def suggest_priority(self, text: str) -> TaskPriority: ...
    async def summarize(self, tasks: Sequence[Task]) -> str: ...
    async def suggest_next_actions(self, tasks: Sequence[Task]) -> list[str]: ...
    async def break_down(self, text: str) -> list[str]: ...
