"""Diff models - edit scripts, hunks, and semantic changes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

NO_NEWLINE_MARKER = "\\ No newline at end of file"


class DiffStrategy(Enum):
    """How rendered manifests are compared."""

    UNIFIED = "unified"
    SEMANTIC = "semantic"


# =============================================================================
# Line-level (unified)
# =============================================================================


class EditKind(Enum):
    """Line operation; the value is the unified diff prefix."""

    EQUAL = " "
    DELETE = "-"
    INSERT = "+"


@dataclass(frozen=True, slots=True)
class Edit:
    """One step of an edit script.

    ``line`` keeps its trailing newline, if it has one. ``old_index`` is set
    for EQUAL and DELETE, ``new_index`` for EQUAL and INSERT (both 0-based).
    """

    kind: EditKind
    line: str
    old_index: int | None = None
    new_index: int | None = None


def _format_range(start: int, count: int) -> str:
    # GNU convention: empty ranges name the line before them
    beginning = start + 1
    if count == 1:
        return f"{beginning}"
    if count == 0:
        beginning -= 1
    return f"{beginning},{count}"


@dataclass(frozen=True)
class Hunk:
    """Contiguous run of edits with surrounding context."""

    old_start: int  # 0-based
    old_count: int
    new_start: int  # 0-based
    new_count: int
    edits: tuple[Edit, ...]

    @property
    def header(self) -> str:
        old = _format_range(self.old_start, self.old_count)
        new = _format_range(self.new_start, self.new_count)
        return f"@@ -{old} +{new} @@"

    def lines(self) -> list[str]:
        """Rendered lines, without trailing newlines."""
        out = [self.header]
        for edit in self.edits:
            if edit.line.endswith("\n"):
                out.append(edit.kind.value + edit.line[:-1])
            else:
                out.append(edit.kind.value + edit.line)
                out.append(NO_NEWLINE_MARKER)
        return out


@dataclass(frozen=True)
class UnifiedDiff:
    """Line diff from ``from_label`` (target) to ``to_label`` (local)."""

    from_label: str
    to_label: str
    hunks: tuple[Hunk, ...] = field(default_factory=tuple)

    @property
    def has_differences(self) -> bool:
        return bool(self.hunks)

    def lines(self) -> list[str]:
        if not self.hunks:
            return []
        out = [f"--- {self.from_label}", f"+++ {self.to_label}"]
        for hunk in self.hunks:
            out.extend(hunk.lines())
        return out

    @property
    def text(self) -> str:
        """Unified diff text; empty when there is no difference."""
        lines = self.lines()
        return "\n".join(lines) + "\n" if lines else ""


# =============================================================================
# Document-level (semantic)
# =============================================================================


class ChangeKind(Enum):
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


@dataclass(frozen=True)
class FieldChange:
    """A changed value at a dotted field path (``.`` is the document root)."""

    kind: ChangeKind
    path: str
    old: Any = None
    new: Any = None


@dataclass(frozen=True)
class DocumentDiff:
    """Changes to one document.

    Documents present on one side only carry ADDED or REMOVED and the whole
    document in ``document``; matched documents carry MODIFIED and their
    field changes.
    """

    identity: str
    kind: ChangeKind
    changes: tuple[FieldChange, ...] = ()
    document: Any = None


@dataclass(frozen=True)
class SemanticDiff:
    """Structural diff from ``from_label`` (target) to ``to_label`` (local)."""

    from_label: str
    to_label: str
    documents: tuple[DocumentDiff, ...] = field(default_factory=tuple)

    @property
    def has_differences(self) -> bool:
        return bool(self.documents)


DiffResult = UnifiedDiff | SemanticDiff
