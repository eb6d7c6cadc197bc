"""Repository access layer - owns pygit2.Repository and the git subprocess."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pygit2

from rdv.core.errors import NotARepositoryError, SnapshotCreationError
from rdv.git._internal.errors import git_operation
from rdv.git.errors import GitCommandError, GitError, RefNotFoundError, WorktreeError

_GIT_TIMEOUT_SEC = 120


class RepoAccess:
    """Owns pygit2.Repository and provides normalized access to repo state."""

    def __init__(self, repo_path: Path | str) -> None:
        self._path = Path(repo_path)
        try:
            self._repo = pygit2.Repository(str(self._path))
        except pygit2.GitError as e:
            raise NotARepositoryError.for_path(str(self._path)) from e

    @classmethod
    def discover(cls, start: Path | str) -> RepoAccess:
        """Open the repository containing ``start``, searching upwards."""
        found = pygit2.discover_repository(str(start))
        if found is None:
            raise NotARepositoryError.for_path(str(start))
        return cls(found)

    @property
    def path(self) -> Path:
        return Path(self._repo.workdir) if self._repo.workdir else self._path

    @property
    def git_dir(self) -> Path:
        return Path(self._repo.path)

    # =========================================================================
    # Resolution Helpers
    # =========================================================================

    def resolve_ref_oid(self, ref: str) -> pygit2.Oid:
        try:
            obj = self._repo.revparse_single(ref)
        except (pygit2.GitError, KeyError, ValueError) as e:
            raise RefNotFoundError(ref, str(e).strip()) from e
        if isinstance(obj, pygit2.Tag):
            obj = obj.peel(pygit2.Commit)
        if not isinstance(obj, pygit2.Commit):
            raise RefNotFoundError(ref, "not a commit")
        return obj.id

    # =========================================================================
    # Branch Access
    # =========================================================================

    def local_branch(self, name: str) -> pygit2.Branch | None:
        if name in self._repo.branches.local:
            return self._repo.branches.local[name]
        return None

    def upstream_shorthand(self, name: str) -> str | None:
        """Short name of the branch's configured upstream, if any."""
        branch = self.local_branch(name)
        if branch is None:
            return None
        try:
            with git_operation("upstream lookup"):
                upstream = branch.upstream
        except (GitError, KeyError, ValueError):
            # Configured upstream whose remote-tracking ref is gone
            return None
        if upstream is None:
            return None
        return str(upstream.shorthand)

    # =========================================================================
    # Worktree Operations
    # =========================================================================

    def list_worktrees(self) -> list[str]:
        """List worktree names (excluding main)."""
        return list(self._repo.list_worktrees())

    def run_git(self, *args: str) -> subprocess.CompletedProcess[str]:
        """Run the git CLI in the repository root."""
        git = shutil.which("git")
        if git is None:
            raise SnapshotCreationError.git_not_found()
        try:
            result = subprocess.run(
                [git, *args],
                cwd=str(self.path),
                capture_output=True,
                text=True,
                timeout=_GIT_TIMEOUT_SEC,
            )
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(list(args), -1, f"timed out after {_GIT_TIMEOUT_SEC}s") from e
        if result.returncode != 0:
            output = (result.stderr or result.stdout).strip()
            raise GitCommandError(list(args), result.returncode, output)
        return result

    def add_detached_worktree(self, path: Path, ref: str) -> None:
        """Check ``ref`` out into ``path`` as a detached worktree."""
        try:
            self.run_git("worktree", "add", "--detach", str(path), ref)
        except GitCommandError as e:
            raise WorktreeError("add", str(path), e.output) from e

    def remove_worktree(self, path: Path, force: bool = False) -> None:
        """Remove worktree using git subprocess for correctness."""
        cmd = ["worktree", "remove"]
        if force:
            # Need --force twice: once for dirty, once for locked
            cmd.extend(["--force", "--force"])
        cmd.append(str(path))
        try:
            self.run_git(*cmd)
        except GitCommandError as e:
            raise WorktreeError("remove", str(path), e.output) from e

    def prune_worktrees(self) -> None:
        try:
            self.run_git("worktree", "prune")
        except GitCommandError as e:
            raise WorktreeError("prune", str(self.path), e.output) from e
