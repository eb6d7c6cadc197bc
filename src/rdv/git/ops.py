"""Git operations needed for revision snapshots."""

from __future__ import annotations

from pathlib import Path

from rdv.core.logging import get_logger
from rdv.git._internal import RepoAccess

log = get_logger(__name__)


class GitOps:
    """Thin wrapper around pygit2.Repository with cleaner error handling."""

    def __init__(self, repo_path: Path | str) -> None:
        self._access = RepoAccess(repo_path)

    @classmethod
    def discover(cls, start: Path | str) -> GitOps:
        """GitOps for the repository enclosing ``start``.

        Raises:
            NotARepositoryError: If no repository encloses ``start``
        """
        return cls(RepoAccess.discover(start).git_dir)

    @property
    def path(self) -> Path:
        """Absolute working-tree root."""
        return self._access.path

    # =========================================================================
    # Refs
    # =========================================================================

    def resolve_target_ref(self, ref: str) -> str:
        """Prefer the upstream of a local branch when one is configured.

        Names containing a slash are taken to be remote-qualified already and
        are returned unchanged, as is ``HEAD``. Anything without a configured
        upstream is also returned unchanged.
        """
        if ref == "HEAD" or "/" in ref:
            return ref
        upstream = self._access.upstream_shorthand(ref)
        if upstream is None:
            return ref
        log.debug("upstream_resolved", ref=ref, upstream=upstream)
        return upstream

    def verify_ref(self, ref: str) -> str:
        """Return the commit id ``ref`` names.

        Raises:
            RefNotFoundError: If ``ref`` does not resolve to a commit
        """
        return str(self._access.resolve_ref_oid(ref))

    # =========================================================================
    # Worktrees
    # =========================================================================

    def list_worktrees(self) -> list[str]:
        return self._access.list_worktrees()

    def add_detached_worktree(self, path: Path, commit: str) -> None:
        self._access.add_detached_worktree(path, commit)

    def remove_worktree(self, path: Path) -> None:
        self._access.remove_worktree(path, force=True)

    def prune_worktrees(self) -> None:
        self._access.prune_worktrees()
