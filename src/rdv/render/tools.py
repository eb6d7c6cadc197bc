"""Renderer implementations - turn a source directory into manifest text.

Each renderer drives an external tool through ``run_process``. A path that is
not a renderable source raises ``SourceNotFoundError``; every other failure
raises ``RenderError``.
"""

from __future__ import annotations

import shutil
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import yaml

from rdv.config.constants import HELM_CHART_FILE, KUSTOMIZATION_FILES
from rdv.config.models import RenderConfig
from rdv.core.errors import RenderError, SourceNotFoundError
from rdv.core.logging import get_logger
from rdv.core.process import ProcessResult, run_process

log = get_logger(__name__)


@runtime_checkable
class Renderer(Protocol):
    """Turns a source directory into a multi-document YAML stream."""

    async def render(
        self, path: Path, value_files: Sequence[Path], *, lint: bool = False
    ) -> str: ...


def is_helm_chart(path: Path) -> bool:
    return (path / HELM_CHART_FILE).is_file()


def is_kustomization(path: Path) -> bool:
    return any((path / name).is_file() for name in KUSTOMIZATION_FILES)


async def _run(cmd: list[str], path: Path, timeout: float | None) -> ProcessResult:
    try:
        return await run_process(cmd, cwd=path, timeout=timeout)
    except TimeoutError as e:
        tool = f"{Path(cmd[0]).name} {cmd[1]}"
        raise RenderError.failed(str(path), f"'{tool}' timed out after {timeout}s") from e
    except OSError as e:
        raise RenderError.failed(str(path), f"could not run {cmd[0]}: {e}") from e


def _require_binary(name: str, path: Path) -> str:
    found = shutil.which(name)
    if found is None:
        raise RenderError.failed(str(path), f"{name} not found in PATH")
    return found


# =============================================================================
# Helm
# =============================================================================


def _values_args(value_files: Sequence[Path]) -> list[str]:
    # Later files override earlier ones, as with 'helm -f a -f b'
    args: list[str] = []
    for values in value_files:
        if not values.is_file():
            log.warning("values_file_missing", path=str(values))
            continue
        args.extend(["-f", str(values)])
    return args


def _chart_dependencies(chart_file: Path) -> list[Any]:
    try:
        chart = yaml.safe_load(chart_file.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise RenderError.failed(str(chart_file.parent), f"failed to load chart: {e}") from e
    if not isinstance(chart, dict):
        raise RenderError.failed(str(chart_file.parent), f"{HELM_CHART_FILE} is not a mapping")
    return list(chart.get("dependencies") or [])


class HelmRenderer:
    """Renders a chart with ``helm template``, optionally after ``helm lint``."""

    def __init__(self, config: RenderConfig | None = None) -> None:
        self._config = config or RenderConfig()

    async def render(
        self, path: Path, value_files: Sequence[Path], *, lint: bool = False
    ) -> str:
        if not is_helm_chart(path):
            raise SourceNotFoundError.for_path(str(path))
        helm = _require_binary(self._config.helm_binary, path)

        if _chart_dependencies(path / HELM_CHART_FILE):
            await self._build_dependencies(helm, path)

        values_args = _values_args(value_files)
        if lint:
            await self._lint(helm, path, values_args)

        cmd = [
            helm,
            "template",
            self._config.release_name,
            str(path),
            "--namespace",
            self._config.namespace,
            *values_args,
        ]

        log.debug("render_started", renderer="helm", path=str(path))
        result = await _run(cmd, path, self._config.timeout_sec)
        if not result.ok:
            raise RenderError.failed(str(path), result.error_output)
        return result.stdout

    async def _lint(self, helm: str, path: Path, values_args: list[str]) -> None:
        log.info("helm_lint", path=str(path))
        result = await _run(
            [helm, "lint", str(path), *values_args], path, self._config.timeout_sec
        )
        if not result.ok:
            # helm lint reports findings on stdout and only a summary on stderr
            findings = result.stdout.strip() or result.error_output
            raise RenderError.failed(str(path), f"helm lint failed: {findings}")
        log.debug("helm_lint_passed", path=str(path), output=result.stdout.strip())

    async def _build_dependencies(self, helm: str, path: Path) -> None:
        action = "update" if self._config.update_dependencies else "build"
        log.info("helm_dependencies", action=action, path=str(path))
        result = await _run([helm, "dependency", action, str(path)], path, self._config.timeout_sec)
        if not result.ok:
            raise RenderError.failed(
                str(path), f"failed to run dependency {action}: {result.error_output}"
            )


# =============================================================================
# Kustomize
# =============================================================================


class KustomizeRenderer:
    """Renders a kustomization with ``kustomize build`` or ``kubectl kustomize``."""

    def __init__(self, config: RenderConfig | None = None) -> None:
        self._config = config or RenderConfig()

    def _command(self, path: Path) -> list[str]:
        kustomize = shutil.which(self._config.kustomize_binary)
        if kustomize is not None:
            return [kustomize, "build", str(path)]
        kubectl = shutil.which(self._config.kubectl_binary)
        if kubectl is not None:
            return [kubectl, "kustomize", str(path)]
        raise RenderError.failed(
            str(path),
            f"neither {self._config.kustomize_binary} nor {self._config.kubectl_binary} "
            "found in PATH",
        )

    async def render(
        self, path: Path, value_files: Sequence[Path], *, lint: bool = False
    ) -> str:
        if not is_kustomization(path):
            raise SourceNotFoundError.for_path(str(path))
        if value_files:
            log.debug("values_ignored_for_kustomize", path=str(path), count=len(value_files))
        if lint:
            log.debug("lint_skipped_for_kustomize", path=str(path))

        log.debug("render_started", renderer="kustomize", path=str(path))
        result = await _run(self._command(path), path, self._config.timeout_sec)
        if not result.ok:
            raise RenderError.failed(
                str(path), f"failed to run kustomize build: {result.error_output}"
            )
        return result.stdout


# =============================================================================
# Auto-detection
# =============================================================================


class SourceRenderer:
    """Picks the renderer matching what the directory contains.

    A chart wins over a kustomization when both markers are present.
    """

    def __init__(self, config: RenderConfig | None = None) -> None:
        self._helm = HelmRenderer(config)
        self._kustomize = KustomizeRenderer(config)

    async def render(
        self, path: Path, value_files: Sequence[Path], *, lint: bool = False
    ) -> str:
        if not path.is_dir():
            raise SourceNotFoundError.for_path(str(path))
        if is_helm_chart(path):
            return await self._helm.render(path, value_files, lint=lint)
        if is_kustomization(path):
            return await self._kustomize.render(path, value_files, lint=lint)
        raise SourceNotFoundError.for_path(str(path))
