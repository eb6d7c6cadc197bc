"""Summary formatting utilities for consistent terminal output.

Design principles:
- Every summary fits on one line (~80 chars max)
- Grammatically correct (1 document vs 2 documents)
"""

from __future__ import annotations


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return grammatically correct singular/plural form.

    Examples:
        pluralize(1, "document") -> "1 document"
        pluralize(3, "change") -> "3 changes"
    """
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


def truncate_line(line: str, max_len: int = 120) -> str:
    """Shorten a single line for log events, keeping the head."""
    if len(line) <= max_len:
        return line
    return line[: max_len - 3] + "..."


def first_line(text: str) -> str:
    """First non-empty line of tool output, stripped."""
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""
