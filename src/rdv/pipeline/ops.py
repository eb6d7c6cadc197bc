"""End-to-end render-and-diff run."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from rich.console import Console

from rdv.config.constants import LOCAL_LABEL_PREFIX
from rdv.config.models import RdvConfig
from rdv.core.logging import get_logger
from rdv.core.progress import spinner
from rdv.core.signals import interrupt_guard
from rdv.diff.ops import compute
from rdv.files.ops import resolve_render_path
from rdv.git.ops import GitOps
from rdv.git.snapshot import open_snapshot
from rdv.pipeline.models import PipelineOptions, PipelineResult
from rdv.render.models import RenderInput
from rdv.render.ops import RenderOrchestrator
from rdv.render.tools import Renderer, SourceRenderer
from rdv.report.ops import Reporter
from rdv.validate.ops import KubeconformValidator, Validator

log = get_logger(__name__)


def run_pipeline(
    options: PipelineOptions,
    config: RdvConfig,
    *,
    cwd: Path | None = None,
    renderer: Renderer | None = None,
    validator: Validator | None = None,
    console: Console | None = None,
) -> PipelineResult:
    """Render the path locally and at ``options.ref``, diff, and report.

    The snapshot of the target ref is removed before this returns, whether
    the run succeeds, fails, or is interrupted.

    Args:
        options: What to render and how to compare
        config: Loaded configuration
        cwd: Directory to discover the repository from (default: process cwd)
        renderer: Renderer override (default: auto-detecting SourceRenderer)
        validator: Validator override, used only with ``options.validate``
        console: Where the report goes (default: no printing)

    Raises:
        RdvError: Any pipeline failure, tagged with its stage
    """
    start = cwd or Path.cwd()
    git = GitOps.discover(start)
    repo_root = git.path
    log.debug("repository_discovered", root=str(repo_root))

    user_path = options.path
    if cwd is not None and not os.path.isabs(user_path):
        user_path = str(cwd / user_path)
    resolved = resolve_render_path(user_path, repo_root)

    renderer = renderer or SourceRenderer(config.render)
    if options.validate:
        validator = validator or KubeconformValidator(config.validation)
    else:
        validator = None
    orchestrator = RenderOrchestrator(renderer, validator, lint=config.render.lint)

    with (
        interrupt_guard(),
        open_snapshot(
            repo_root, options.ref, track_upstream=config.diff.track_upstream, git=git
        ) as snapshot,
    ):
        ref = snapshot.ref
        log.info(f"Starting diff against git ref '{ref}'")
        local = RenderInput.at(resolved.absolute, options.value_files)
        target = RenderInput.at(resolved.under(snapshot.path), options.value_files)
        with spinner("Rendering manifests"):
            local_result, target_result = asyncio.run(orchestrator.render_both(local, target))

    relative = resolved.relative.as_posix()
    diff = compute(
        options.strategy,
        target_result.text_or_empty,
        local_result.text_or_empty,
        f"{ref}/{relative}",
        f"{LOCAL_LABEL_PREFIX}/{relative}",
        context_lines=config.diff.context_lines,
    )

    reporter = Reporter(plain=options.plain)
    report = reporter.render(diff, title=f"--- Diff ({ref} vs. local) ---")
    if console is not None:
        reporter.emit(report, console)

    return PipelineResult(
        ref=ref,
        relative_path=resolved.relative,
        target_absent=target_result.absent,
        diff=diff,
        report=report,
    )
