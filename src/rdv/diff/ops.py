"""Diff dispatch - one entry point for every strategy."""

from __future__ import annotations

from collections.abc import Callable

from rdv.core.logging import get_logger
from rdv.diff.models import DiffResult, DiffStrategy
from rdv.diff.semantic import semantic_diff
from rdv.diff.unified import unified_diff

log = get_logger(__name__)

_Strategy = Callable[[str, str, str, str, int], DiffResult]


def _run_unified(
    target: str, local: str, target_label: str, local_label: str, context_lines: int
) -> DiffResult:
    return unified_diff(target, local, target_label, local_label, context_lines)


def _run_semantic(
    target: str, local: str, target_label: str, local_label: str, _context_lines: int
) -> DiffResult:
    return semantic_diff(target, local, target_label, local_label)


_STRATEGIES: dict[DiffStrategy, _Strategy] = {
    DiffStrategy.UNIFIED: _run_unified,
    DiffStrategy.SEMANTIC: _run_semantic,
}


def compute(
    strategy: DiffStrategy,
    target_text: str,
    local_text: str,
    target_label: str,
    local_label: str,
    context_lines: int = 3,
) -> DiffResult:
    """Compare target and local renders.

    An absent side is passed as ``""``; the other side then shows up as
    entirely added or entirely removed.

    Raises:
        DiffEngineError: If the semantic strategy cannot parse either side
    """
    run = _STRATEGIES[strategy]
    result = run(target_text, local_text, target_label, local_label, context_lines)
    log.debug("diff_computed", strategy=strategy.value, has_differences=result.has_differences)
    return result
