# src/taskmaster/server/tools.py

"""
Named operations (MCP tools) over the task store.

One table, two transports: the stdio server and the HTTP/SSE server both
list and call tools through ToolDispatcher, so business logic lives here once.

Errors:
- unknown tool name     -> McpError(METHOD_NOT_FOUND)
- arguments off-schema  -> McpError(INVALID_PARAMS), before the handler runs
- anything a handler raises is wrapped into McpError(INTERNAL_ERROR),
  except an McpError, which passes through unchanged.
  A missing task is therefore reported as INTERNAL_ERROR.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import jsonschema
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData

from ..tasks.task_models import Task, TaskFilters, TaskPriority, TaskStatus
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)

ToolHandler = Callable[[TaskStore, dict[str, Any]], Awaitable[str]]

_STATUS_VALUES = [s.value for s in TaskStatus]
_PRIORITY_VALUES = [p.value for p in TaskPriority]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    name: str
    description: str
    input_schema: dict[str, Any]
    handler: ToolHandler


def _dump(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def _bullets(items: list[str]) -> str:
    return "\n".join(f"• {item}" for item in items)


async def _list_tasks(store: TaskStore, args: dict[str, Any]) -> str:
    tasks = store.list_tasks(TaskFilters.from_args(args))
    return _dump([t.to_dict() for t in tasks])


async def _create_task(store: TaskStore, args: dict[str, Any]) -> str:
    task: Task = await store.create_task(
        args["description"],
        category=args.get("category"),
        priority=args.get("priority"),
    )
    return f"Task created successfully: {_dump(task.to_dict())}"


async def _update_task(store: TaskStore, args: dict[str, Any]) -> str:
    task = store.update_task(
        int(args["taskId"]),
        description=args.get("description"),
        status=args.get("status"),
        category=args.get("category"),
        priority=args.get("priority"),
    )
    return f"Task updated successfully: {_dump(task.to_dict())}"


async def _delete_task(store: TaskStore, args: dict[str, Any]) -> str:
    task_id = int(args["taskId"])
    store.delete_task(task_id)
    return f"Task with ID {task_id} deleted successfully"


async def _get_task_analysis(store: TaskStore, args: dict[str, Any]) -> str:
    analysis = await store.analysis()
    return (
        f"Task Analysis:\n\n{analysis['summary']}\n\n"
        f"Recommended Next Actions:\n{_bullets(analysis['nextActions'])}"
    )


async def _get_task_recommendations(store: TaskStore, args: dict[str, Any]) -> str:
    recommendations = await store.recommendations()
    return f"AI-Powered Task Recommendations:\n\n{_bullets(recommendations)}"


def _status_prop(description: str) -> dict[str, Any]:
    return {"type": "string", "enum": _STATUS_VALUES, "description": description}


def _priority_prop(description: str) -> dict[str, Any]:
    return {"type": "string", "enum": _PRIORITY_VALUES, "description": description}


TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="listTasks",
        description="List all tasks with optional filtering by status, category, or priority.",
        input_schema={
            "type": "object",
            "properties": {
                "status": _status_prop("Filter tasks by status"),
                "category": {"type": "string", "description": "Filter tasks by category"},
                "priority": _priority_prop("Filter tasks by priority"),
            },
        },
        handler=_list_tasks,
    ),
    ToolSpec(
        name="createTask",
        description=(
            "Create a new task with AI-enhanced description, category suggestion, "
            "and priority recommendation"
        ),
        input_schema={
            "type": "object",
            "properties": {
                "description": {"type": "string", "minLength": 1, "description": "Task description"},
                "category": {"type": "string", "description": "Task category (optional)"},
                "priority": _priority_prop("Task priority (optional, suggested by AI when omitted)"),
            },
            "required": ["description"],
        },
        handler=_create_task,
    ),
    ToolSpec(
        name="updateTask",
        description="Update an existing task",
        input_schema={
            "type": "object",
            "properties": {
                "taskId": {"type": "integer", "description": "ID of the task to update"},
                "description": {"type": "string", "minLength": 1, "description": "New task description (optional)"},
                "status": _status_prop("New task status (optional)"),
                "category": {"type": "string", "description": "New task category (optional)"},
                "priority": _priority_prop("New task priority (optional)"),
            },
            "required": ["taskId"],
        },
        handler=_update_task,
    ),
    ToolSpec(
        name="deleteTask",
        description="Delete a task",
        input_schema={
            "type": "object",
            "properties": {
                "taskId": {"type": "integer", "description": "ID of the task to delete"},
            },
            "required": ["taskId"],
        },
        handler=_delete_task,
    ),
    ToolSpec(
        name="getTaskAnalysis",
        description="Get AI-powered analysis of all tasks with summary and next action recommendations",
        input_schema={"type": "object", "properties": {}},
        handler=_get_task_analysis,
    ),
    ToolSpec(
        name="getTaskRecommendations",
        description="Get AI-powered recommendations for next actions based on current tasks",
        input_schema={"type": "object", "properties": {}},
        handler=_get_task_recommendations,
    ),
)


class ToolDispatcher:
    """Validate -> execute -> respond, for one shared TaskStore."""

    def __init__(self, store: TaskStore, tools: tuple[ToolSpec, ...] = TOOLS) -> None:
        self._store = store
        self._tools: dict[str, ToolSpec] = {t.name: t for t in tools}

    def list_tools(self) -> list[ToolSpec]:
        return list(self._tools.values())

    def _validate(self, spec: ToolSpec, arguments: dict[str, Any]) -> None:
        try:
            jsonschema.validate(instance=arguments, schema=spec.input_schema)
        except jsonschema.ValidationError as e:
            raise McpError(
                ErrorData(code=INVALID_PARAMS, message=f"Invalid arguments for tool {spec.name}: {e.message}")
            ) from e

    async def call(self, name: str, arguments: dict[str, Any] | None = None) -> str:
        spec = self._tools.get(name)
        if spec is None:
            raise McpError(ErrorData(code=METHOD_NOT_FOUND, message=f"Unknown tool: {name}"))

        arguments = dict(arguments or {})
        self._validate(spec, arguments)

        try:
            return await spec.handler(self._store, arguments)
        except McpError:
            raise
        except Exception as e:
            logger.warning("Tool %s failed: %s", name, e)
            raise McpError(
                ErrorData(code=INTERNAL_ERROR, message=f"Error executing tool {name}: {e}")
            ) from e
