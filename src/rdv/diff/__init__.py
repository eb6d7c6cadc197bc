"""Manifest diffing - unified line diffs and semantic YAML diffs."""

from rdv.diff.models import (
    ChangeKind,
    DiffResult,
    DiffStrategy,
    DocumentDiff,
    Edit,
    EditKind,
    FieldChange,
    Hunk,
    SemanticDiff,
    UnifiedDiff,
)
from rdv.diff.myers import shortest_edit_script
from rdv.diff.ops import compute
from rdv.diff.semantic import semantic_diff
from rdv.diff.unified import unified_diff

__all__ = [
    "compute",
    "semantic_diff",
    "shortest_edit_script",
    "unified_diff",
    # Models
    "ChangeKind",
    "DiffResult",
    "DiffStrategy",
    "DocumentDiff",
    "Edit",
    "EditKind",
    "FieldChange",
    "Hunk",
    "SemanticDiff",
    "UnifiedDiff",
]
