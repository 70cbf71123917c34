# src/taskmaster/llm/assistant.py

"""
Task assistant: domain intents on top of a TextGenerator.

Each operation owns its fallback value. A failed generation call (network,
timeout, empty response, unusable answer) is logged and replaced by that
fallback, so callers always get something usable.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..core.ports import TextGenerator
from ..tasks.task_models import Task, TaskPriority
from .parsing import first_line, parse_bullets

logger = logging.getLogger(__name__)

CATEGORIES: tuple[str, ...] = (
    "Development",
    "Documentation",
    "Testing",
    "Design",
    "Marketing",
    "Planning",
    "Research",
    "Bug Fix",
    "Feature",
    "Maintenance",
    "Other",
)

FALLBACK_CATEGORY = "Other"
FALLBACK_PRIORITY = TaskPriority.MEDIUM
FALLBACK_SUMMARY = "Unable to generate task summary at this time."
FALLBACK_NEXT_ACTIONS: tuple[str, ...] = (
    "Review current task priorities",
    "Focus on high-priority items",
    "Check for any blockers",
)

# Lower temperatures for classification, higher for generative answers.
TEMPERATURE_ENHANCE = 0.3
TEMPERATURE_CLASSIFY = 0.1
TEMPERATURE_SUMMARY = 0.5
TEMPERATURE_NEXT_ACTIONS = 0.6
TEMPERATURE_BREAKDOWN = 0.4

ENHANCE_PROMPT = """
As a task management assistant, enhance the following task description to make it more clear, actionable, and specific.
Keep it concise but comprehensive. Only return the enhanced task description, nothing else.

Original task: "{text}"

Enhanced task:"""

CATEGORY_PROMPT = """
Based on the following task description, suggest the most appropriate category from these options:
{options}

Task: "{text}"

Category (respond with only one word):"""

PRIORITY_PROMPT = """
Based on the following task description, suggest the priority level:
- high: Critical, urgent, blocking other work
- medium: Important but not urgent
- low: Nice to have, can be delayed

Task: "{text}"

Priority (respond with only: low, medium, or high):"""

SUMMARY_PROMPT = """
Analyze the following task list and provide a brief summary including:
1. Total number of tasks
2. Status breakdown
3. Priority insights
4. Key focus areas
5. Recommendations

Tasks:
{task_list}

Summary:"""

NEXT_ACTIONS_PROMPT = """
Based on the following task list, suggest 3-5 specific next actions that would be most valuable to focus on.
Consider task priorities, dependencies, and overall project flow.

Tasks:
{task_list}

Suggest next actions (one per line, start each with "- "):"""

BREAKDOWN_PROMPT = """
Break down the following complex task into smaller, actionable subtasks.
Each subtask should be specific and achievable.

Task: "{text}"

Subtasks (one per line, start each with "- "):"""

_CATEGORY_LOOKUP = {c.lower(): c for c in CATEGORIES}


def render_task_list(tasks: Sequence[Task]) -> str:
    """One bullet per task: '- description (status, priority priority, category)'."""
    return "\n".join(
        f"- {t.description} ({t.status.value}, {t.priority.value} priority, {t.category or 'No category'})"
        for t in tasks
    )


def normalize_category(raw: str | None) -> str | None:
    """Map a model answer onto the closed vocabulary (canonical spelling), or None."""
    line = first_line(raw)
    if not line:
        return None
    return _CATEGORY_LOOKUP.get(line.lower())


class GenerationTaskAssistant:
    def __init__(self, generator: TextGenerator) -> None:
        self._generator = generator

    async def enhance_description(self, text: str) -> str:
        try:
            enhanced = await self._generator.generate(ENHANCE_PROMPT.format(text=text), temperature=TEMPERATURE_ENHANCE)
        except Exception as e:
            logger.warning("enhance_description failed, keeping original: %s", e)
            return text
        return enhanced.strip() or text

    async def suggest_category(self, text: str) -> str:
        prompt = CATEGORY_PROMPT.format(options="\n".join(f"- {c}" for c in CATEGORIES), text=text)
        try:
            raw = await self._generator.generate(prompt, temperature=TEMPERATURE_CLASSIFY)
        except Exception as e:
            logger.warning("suggest_category failed, using %s: %s", FALLBACK_CATEGORY, e)
            return FALLBACK_CATEGORY

        category = normalize_category(raw)
        if category is None:
            logger.info("suggest_category: unusable answer %r, using %s", raw[:80], FALLBACK_CATEGORY)
            return FALLBACK_CATEGORY
        return category

    async def suggest_priority(self, text: str) -> TaskPriority:
        try:
            raw = await self._generator.generate(PRIORITY_PROMPT.format(text=text), temperature=TEMPERATURE_CLASSIFY)
        except Exception as e:
            logger.warning("suggest_priority failed, using %s: %s", FALLBACK_PRIORITY.value, e)
            return FALLBACK_PRIORITY

        priority = TaskPriority.parse(raw)
        if priority is None:
            logger.info("suggest_priority: unusable answer %r, using %s", raw[:80], FALLBACK_PRIORITY.value)
            return FALLBACK_PRIORITY
        return priority

    async def summarize(self, tasks: Sequence[Task]) -> str:
        prompt = SUMMARY_PROMPT.format(task_list=render_task_list(tasks))
        try:
            summary = await self._generator.generate(prompt, temperature=TEMPERATURE_SUMMARY)
        except Exception as e:
            logger.warning("summarize failed: %s", e)
            return FALLBACK_SUMMARY
        return summary.strip() or FALLBACK_SUMMARY

    async def suggest_next_actions(self, tasks: Sequence[Task]) -> list[str]:
        prompt = NEXT_ACTIONS_PROMPT.format(task_list=render_task_list(tasks))
        try:
            raw = await self._generator.generate(prompt, temperature=TEMPERATURE_NEXT_ACTIONS)
        except Exception as e:
            logger.warning("suggest_next_actions failed: %s", e)
            return list(FALLBACK_NEXT_ACTIONS)
        return parse_bullets(raw)

    async def break_down(self, text: str) -> list[str]:
        try:
            raw = await self._generator.generate(BREAKDOWN_PROMPT.format(text=text), temperature=TEMPERATURE_BREAKDOWN)
        except Exception as e:
            logger.warning("break_down failed, keeping the task whole: %s", e)
            return [text]
        return parse_bullets(raw)
