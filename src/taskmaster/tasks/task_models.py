# src/taskmaster/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    PENDING = "pending"
    STARTED = "started"
    DONE = "done"


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: str | None) -> TaskPriority | None:
        """Lenient parse of model output: trimmed, case-insensitive, None if not a priority."""
        if not raw:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


def format_timestamp(ts: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a 'Z' suffix."""
    return ts.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(slots=True)
class Task:
    id: int
    description: str
    status: TaskStatus
    priority: TaskPriority
    created_at: datetime
    updated_at: datetime

    category: str | None = None
    enhanced_description: str | None = None
    ai_suggestions: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Wire form: camelCase keys, unset optional fields omitted."""
        out: dict[str, Any] = {
            "id": self.id,
            "description": self.description,
            "status": self.status.value,
        }
        if self.category is not None:
            out["category"] = self.category
        out["priority"] = self.priority.value
        out["createdAt"] = format_timestamp(self.created_at)
        out["updatedAt"] = format_timestamp(self.updated_at)
        if self.enhanced_description is not None:
            out["enhancedDescription"] = self.enhanced_description
        if self.ai_suggestions is not None:
            out["aiSuggestions"] = list(self.ai_suggestions)
        return out


@dataclass(frozen=True, slots=True)
class TaskFilters:
    """Equality predicates, AND-combined. None means "no constraint"."""

    status: TaskStatus | None = None
    category: str | None = None
    priority: TaskPriority | None = None

    @classmethod
    def from_args(cls, args: dict[str, Any] | None) -> TaskFilters:
        args = args or {}
        status = args.get("status")
        priority = args.get("priority")
        category = args.get("category")
        return cls(
            status=TaskStatus(status) if status else None,
            category=category or None,
            priority=TaskPriority(priority) if priority else None,
        )

    def matches(self, task: Task) -> bool:
        if self.status is not None and task.status != self.status:
            return False
        if self.category is not None and task.category != self.category:
            return False
        if self.priority is not None and task.priority != self.priority:
            return False
        return True
