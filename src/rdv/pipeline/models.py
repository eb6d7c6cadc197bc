"""Pipeline models - invocation options and outcome."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from rdv.diff.models import DiffResult, DiffStrategy
from rdv.report.ops import Report


@dataclass(frozen=True)
class PipelineOptions:
    """One render-and-diff invocation."""

    path: str = "."
    ref: str = "main"
    value_files: tuple[str, ...] = field(default_factory=tuple)
    validate: bool = False
    strategy: DiffStrategy = DiffStrategy.UNIFIED
    plain: bool = False


@dataclass(frozen=True)
class PipelineResult:
    """What a run produced."""

    ref: str  # After upstream resolution, e.g. "origin/main"
    relative_path: Path
    target_absent: bool
    diff: DiffResult
    report: Report

    @property
    def has_differences(self) -> bool:
        return self.report.has_differences
