# src/taskmaster/tasks/task_store.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import Any

from ..core.ports import TaskAssistant
from .task_models import Task, TaskFilters, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

# (description, status, category, priority)
SAMPLE_TASKS: tuple[tuple[str, TaskStatus, str, TaskPriority], ...] = (
    ("Set up development environment", TaskStatus.DONE, "Development", TaskPriority.HIGH),
    ("Write documentation", TaskStatus.STARTED, "Documentation", TaskPriority.MEDIUM),
    ("Review code changes", TaskStatus.PENDING, "Development", TaskPriority.HIGH),
)

_MS = timedelta(milliseconds=1)


class TaskNotFoundError(LookupError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task with ID {task_id} not found")
        self.task_id = task_id


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TaskStore:
    """
    In-memory task store.

    - a single ordered list; insertion order is the listing order
    - ids are max(existing, 0) + 1, and a deleted id is never handed out again
    - nothing is persisted: the list lives and dies with the process

    Concurrency:
    - meant for one event loop; there is no locking. Mutations themselves do not
      await, so they are atomic with respect to other coroutines.
    """

    def __init__(self, assistant: TaskAssistant, *, clock: Clock | None = None) -> None:
        self._assistant = assistant
        self._clock = clock or _utcnow
        self._tasks: list[Task] = []
        # Highest id ever handed out; deleting the top task must not free its id.
        self._last_id = 0

    # ---- low-level helpers ----

    def _now(self, *, after: datetime | None = None) -> datetime:
        """Clock reading at millisecond precision, strictly later than `after` if given."""
        now = self._clock()
        now = now.replace(microsecond=(now.microsecond // 1000) * 1000)
        if after is not None and now <= after:
            now = after + _MS
        return now

    def _next_id(self) -> int:
        self._last_id = max(max((t.id for t in self._tasks), default=0), self._last_id) + 1
        return self._last_id

    def _index_of(self, task_id: int) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        raise TaskNotFoundError(task_id)

    def _append(
        self,
        *,
        description: str,
        status: TaskStatus = TaskStatus.PENDING,
        category: str | None = None,
        priority: TaskPriority = TaskPriority.MEDIUM,
        enhanced_description: str | None = None,
        ai_suggestions: list[str] | None = None,
    ) -> Task:
        now = self._now()
        task = Task(
            id=self._next_id(),
            description=description,
            status=status,
            priority=priority,
            created_at=now,
            updated_at=now,
            category=category,
            enhanced_description=enhanced_description,
            ai_suggestions=ai_suggestions,
        )
        self._tasks.append(task)
        return task

    # ---- public API ----

    def __len__(self) -> int:
        return len(self._tasks)

    def seed_samples(self) -> None:
        for description, status, category, priority in SAMPLE_TASKS:
            self._append(description=description, status=status, category=category, priority=priority)
        logger.info("TaskStore seeded with %d sample tasks", len(SAMPLE_TASKS))

    def list_tasks(self, filters: TaskFilters | None = None) -> list[Task]:
        if filters is None:
            return list(self._tasks)
        return [t for t in self._tasks if filters.matches(t)]

    async def create_task(
        self,
        description: str,
        *,
        category: str | None = None,
        priority: TaskPriority | str | None = None,
    ) -> Task:
        """
        Create a pending task, enriched by the assistant.

        The assistant handles its own generation failures. If it still raises,
        the task is created from the caller's fields alone (priority defaults
        to medium) so creation never fails because of the AI layer.
        """
        if not description or not description.strip():
            raise ValueError("description is required")
        category = category or None
        priority = TaskPriority(priority) if priority else None

        try:
            enhanced, suggested_category, suggested_priority, subtasks = await asyncio.gather(
                self._assistant.enhance_description(description),
                _or_value(category, self._assistant.suggest_category, description),
                _or_value(priority, self._assistant.suggest_priority, description),
                self._assistant.break_down(description),
            )
            suggested_priority = TaskPriority(suggested_priority)
        except Exception:
            logger.exception("AI enrichment failed; creating a basic task")
            task = self._append(
                description=description,
                category=category,
                priority=priority or TaskPriority.MEDIUM,
            )
        else:
            task = self._append(
                description=description,
                category=suggested_category,
                priority=suggested_priority,
                enhanced_description=enhanced,
                ai_suggestions=list(subtasks) if len(subtasks) > 1 else None,
            )

        logger.info("Task created id=%s priority=%s category=%s", task.id, task.priority.value, task.category)
        return task

    def update_task(
        self,
        task_id: int,
        *,
        description: str | None = None,
        status: TaskStatus | str | None = None,
        category: str | None = None,
        priority: TaskPriority | str | None = None,
    ) -> Task:
        idx = self._index_of(task_id)
        current = self._tasks[idx]

        changes: dict[str, Any] = {}
        if description is not None:
            if not description.strip():
                raise ValueError("description must not be empty")
            changes["description"] = description
        if status is not None:
            changes["status"] = TaskStatus(status)
        if category is not None:
            changes["category"] = category
        if priority is not None:
            changes["priority"] = TaskPriority(priority)

        updated = replace(current, **changes, updated_at=self._now(after=current.updated_at))
        self._tasks[idx] = updated
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
        return updated

    def delete_task(self, task_id: int) -> None:
        idx = self._index_of(task_id)
        del self._tasks[idx]
        logger.debug("Task deleted id=%s", task_id)

    def stats(self) -> dict[str, int]:
        counts = {s: 0 for s in TaskStatus}
        for t in self._tasks:
            counts[t.status] += 1
        return {
            "total": len(self._tasks),
            "pending": counts[TaskStatus.PENDING],
            "started": counts[TaskStatus.STARTED],
            "done": counts[TaskStatus.DONE],
        }

    async def analysis(self) -> dict[str, Any]:
        tasks = self.list_tasks()
        summary, next_actions = await asyncio.gather(
            self._assistant.summarize(tasks),
            self._assistant.suggest_next_actions(tasks),
        )
        return {"summary": summary, "nextActions": next_actions}

    async def recommendations(self) -> list[str]:
        return await self._assistant.suggest_next_actions(self.list_tasks())


async def _or_value(value: Any, suggest: Callable[[str], Awaitable[Any]], description: str) -> Any:
    """Caller-supplied value wins; otherwise ask the assistant."""
    if value is not None:
        return value
    return await suggest(description)
