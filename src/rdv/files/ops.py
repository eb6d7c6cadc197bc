"""Render path resolution.

Pure path arithmetic. No git, no filesystem writes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from rdv.core.errors import OutOfRepositoryError


@dataclass(frozen=True, slots=True)
class ResolvedPath:
    """A render path anchored in the repository."""

    absolute: Path
    relative: Path  # Relative to the repository root, "." for the root itself

    def under(self, root: Path) -> Path:
        """Same repository-relative path below another root (e.g. a snapshot)."""
        return root / self.relative


def _relativize(absolute: str, repo_root: str) -> Path | None:
    try:
        rel = Path(os.path.relpath(absolute, repo_root))
    except ValueError:
        # Different drives on Windows
        return None
    if rel.parts and rel.parts[0] == os.pardir:
        return None
    return rel


def resolve_render_path(user_path: str | Path, repo_root: Path) -> ResolvedPath:
    """Resolve a user-supplied path against the repository root.

    Args:
        user_path: Path from the command line, absolute or relative to cwd
        repo_root: Absolute repository root

    Returns:
        ResolvedPath with the normalized absolute path and its
        repository-relative form.

    Raises:
        OutOfRepositoryError: If the path escapes the repository root
    """
    absolute = os.path.abspath(user_path)
    root = os.path.abspath(repo_root)

    relative = _relativize(absolute, root)
    if relative is None:
        # Symlinked prefixes (/tmp -> /private/tmp) only match once both sides are real
        real_relative = _relativize(os.path.realpath(absolute), os.path.realpath(root))
        if real_relative is None:
            raise OutOfRepositoryError.for_path(str(user_path), absolute, root)
        relative = real_relative

    return ResolvedPath(absolute=Path(root) / relative, relative=relative)
