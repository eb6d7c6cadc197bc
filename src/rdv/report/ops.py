"""Diff presentation - colorized or plain text for the terminal."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import yaml
from rich.console import Console
from rich.text import Text

from rdv.config.constants import NO_DIFFERENCES_MESSAGE
from rdv.core.errors import InternalError
from rdv.core.formatting import pluralize
from rdv.diff.models import ChangeKind, DiffResult, FieldChange, SemanticDiff, UnifiedDiff

_ADDED = "green"
_REMOVED = "red"
_HUNK = "cyan"
_HEADING = "bold"


@dataclass(frozen=True)
class Report:
    """A rendered report, ready to print."""

    has_differences: bool
    text: Text

    @property
    def plain_text(self) -> str:
        return self.text.plain


def _format_value(value: Any) -> list[str]:
    """YAML lines for a value; collections become block YAML."""
    if isinstance(value, (dict, list)) and value:
        dumped = yaml.safe_dump(value, sort_keys=True, default_flow_style=False)
        return dumped.rstrip("\n").split("\n")
    dumped = yaml.safe_dump(value, default_flow_style=True).strip()
    # Scalars come back with an explicit document end marker
    return dumped.removesuffix("...").strip().split("\n")


class Reporter:
    """Turns a diff result into a report.

    With ``plain`` set no styles are applied at all.
    """

    def __init__(self, plain: bool = False) -> None:
        self._plain = plain

    def _style(self, style: str | None) -> str | None:
        return None if self._plain else style

    def render(self, result: DiffResult, title: str | None = None) -> Report:
        if not result.has_differences:
            return Report(has_differences=False, text=Text(NO_DIFFERENCES_MESSAGE))

        lines: list[tuple[str, str | None]] = []
        if title:
            lines.append((title, _HEADING))
        if isinstance(result, UnifiedDiff):
            lines.extend(self._unified_lines(result))
        elif isinstance(result, SemanticDiff):
            lines.extend(self._semantic_lines(result))
        else:
            raise InternalError.unexpected(
                "unsupported diff result", result_type=type(result).__name__
            )

        text = Text()
        for i, (line, style) in enumerate(lines):
            if i:
                text.append("\n")
            text.append(line, style=self._style(style))
        return Report(has_differences=True, text=text)

    def emit(self, report: Report, console: Console) -> None:
        console.print(report.text, soft_wrap=True, highlight=False)

    # =========================================================================
    # Unified
    # =========================================================================

    @staticmethod
    def _unified_lines(result: UnifiedDiff) -> list[tuple[str, str | None]]:
        out: list[tuple[str, str | None]] = []
        for i, line in enumerate(result.lines()):
            if i < 2:
                # ---/+++ file headers
                out.append((line, None))
            elif line.startswith("@@"):
                out.append((line, _HUNK))
            elif line.startswith("+"):
                out.append((line, _ADDED))
            elif line.startswith("-"):
                out.append((line, _REMOVED))
            else:
                out.append((line, None))
        return out

    # =========================================================================
    # Semantic
    # =========================================================================

    @staticmethod
    def _value_lines(
        marker: str, value: Any, style: str, indent: str
    ) -> list[tuple[str, str | None]]:
        return [(f"{indent}{marker} {line}", style) for line in _format_value(value)]

    def _change_lines(self, change: FieldChange) -> list[tuple[str, str | None]]:
        out: list[tuple[str, str | None]] = [(f"  {change.path}", None)]
        if change.kind is not ChangeKind.ADDED:
            out.extend(self._value_lines("-", change.old, _REMOVED, "    "))
        if change.kind is not ChangeKind.REMOVED:
            out.extend(self._value_lines("+", change.new, _ADDED, "    "))
        return out

    def _semantic_lines(self, result: SemanticDiff) -> list[tuple[str, str | None]]:
        out: list[tuple[str, str | None]] = [
            (f"--- {result.from_label}", None),
            (f"+++ {result.to_label}", None),
        ]
        for doc in result.documents:
            if doc.kind is ChangeKind.MODIFIED:
                count = pluralize(len(doc.changes), "change")
                heading = f"{doc.identity} ({doc.kind.value}, {count})"
            else:
                heading = f"{doc.identity} ({doc.kind.value})"
            out.append((heading, _HEADING))
            if doc.kind is ChangeKind.ADDED:
                out.extend(self._value_lines("+", doc.document, _ADDED, "  "))
            elif doc.kind is ChangeKind.REMOVED:
                out.extend(self._value_lines("-", doc.document, _REMOVED, "  "))
            else:
                for change in doc.changes:
                    out.extend(self._change_lines(change))
        return out
