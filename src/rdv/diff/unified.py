"""Unified line diff built on the Myers edit script."""

from __future__ import annotations

from rdv.diff.models import Edit, EditKind, Hunk, UnifiedDiff
from rdv.diff.myers import shortest_edit_script


def split_lines(text: str) -> list[str]:
    """Split on ``\\n`` only, keeping terminators.

    A final line without a newline stays distinct from the same line with one.
    """
    if not text:
        return []
    lines = text.split("\n")
    out = [line + "\n" for line in lines[:-1]]
    if lines[-1]:
        out.append(lines[-1])
    return out


def build_hunks(edits: list[Edit], context_lines: int = 3) -> list[Hunk]:
    """Group changed edits into hunks with ``context_lines`` of context.

    Changes separated by at most twice the context share a hunk.
    """
    changes = [i for i, edit in enumerate(edits) if edit.kind is not EditKind.EQUAL]
    if not changes:
        return []

    groups: list[tuple[int, int]] = []
    first = last = changes[0]
    for i in changes[1:]:
        if i - last - 1 <= 2 * context_lines:
            last = i
        else:
            groups.append((first, last))
            first = last = i
    groups.append((first, last))

    # Position of each edit in the old and new texts
    old_pos: list[int] = []
    new_pos: list[int] = []
    old_line = new_line = 0
    for edit in edits:
        old_pos.append(old_line)
        new_pos.append(new_line)
        if edit.kind is not EditKind.INSERT:
            old_line += 1
        if edit.kind is not EditKind.DELETE:
            new_line += 1

    hunks: list[Hunk] = []
    for first, last in groups:
        lo = max(0, first - context_lines)
        hi = min(len(edits), last + context_lines + 1)
        window = tuple(edits[lo:hi])
        hunks.append(
            Hunk(
                old_start=old_pos[lo],
                old_count=sum(1 for e in window if e.kind is not EditKind.INSERT),
                new_start=new_pos[lo],
                new_count=sum(1 for e in window if e.kind is not EditKind.DELETE),
                edits=window,
            )
        )
    return hunks


def unified_diff(
    old_text: str,
    new_text: str,
    from_label: str,
    to_label: str,
    context_lines: int = 3,
) -> UnifiedDiff:
    """Diff ``old_text`` (target) against ``new_text`` (local)."""
    edits = shortest_edit_script(split_lines(old_text), split_lines(new_text))
    return UnifiedDiff(
        from_label=from_label,
        to_label=to_label,
        hunks=tuple(build_hunks(edits, context_lines)),
    )


def apply_edits(edits: list[Edit]) -> str:
    """Text produced by the new side of an edit script."""
    return "".join(edit.line for edit in edits if edit.kind is not EditKind.DELETE)
