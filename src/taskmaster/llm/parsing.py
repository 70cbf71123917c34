# src/taskmaster/llm/parsing.py

from __future__ import annotations

import re

_BULLET_MARKER = re.compile(r"^-\s*")


def parse_bullets(text: str | None) -> list[str]:
    """
    Extract hyphen-prefixed lines from freeform model output.

    Lenient: lines that do not start with "-" (after trimming) are
    dropped, the marker is stripped, empty items are skipped, order is kept.
    No matching lines -> empty list.
    """
    if not text:
        return []

    items: list[str] = []
    for line in text.strip().splitlines():
        line = line.strip()
        if not line.startswith("-"):
            continue
        item = _BULLET_MARKER.sub("", line, count=1).strip()
        if item:
            items.append(item)
    return items


def first_line(text: str | None) -> str:
    """First non-empty line, trimmed of whitespace, quotes and trailing punctuation."""
    if not text:
        return ""
    for line in text.strip().splitlines():
        line = line.strip().strip("\"'`*").rstrip(".!").strip()
        if line:
            return line
    return ""
