"""Read-only snapshots of a revision, materialized as temporary worktrees.

A snapshot lives in a fresh temporary directory registered with git as a
detached worktree. Closing it deregisters the worktree and removes the
directory. Close runs exactly once, whether it is triggered by the
context manager, an explicit call, or interpreter exit.
"""

from __future__ import annotations

import atexit
import shutil
import tempfile
import threading
from pathlib import Path
from types import TracebackType

from rdv.config.constants import SNAPSHOT_DIR_PREFIX
from rdv.core.errors import InvalidRevisionError, SnapshotCreationError
from rdv.core.logging import get_logger
from rdv.git.errors import GitError, RefNotFoundError, WorktreeError
from rdv.git.ops import GitOps

log = get_logger(__name__)


class Snapshot:
    """Checked-out copy of ``ref`` at ``path``."""

    def __init__(self, git: GitOps, path: Path, ref: str) -> None:
        self._git = git
        self.path = path
        self.ref = ref
        self._lock = threading.Lock()
        self._closed = False
        atexit.register(self.close)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Deregister the worktree and delete its directory.

        Idempotent. Failures are logged, never raised.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
        atexit.unregister(self.close)

        deregistered = True
        try:
            self._git.remove_worktree(self.path)
        except (GitError, SnapshotCreationError) as e:
            log.debug("worktree_remove_failed", path=str(self.path), error=str(e))
            deregistered = False

        shutil.rmtree(self.path, ignore_errors=True)
        if self.path.exists():
            log.warning("snapshot_dir_not_removed", path=str(self.path))

        if not deregistered:
            # Directory is gone now, so prune drops any stale registration
            try:
                self._git.prune_worktrees()
            except (GitError, SnapshotCreationError) as e:
                log.warning("worktree_deregister_failed", path=str(self.path), error=str(e))

        log.debug("snapshot_closed", path=str(self.path), ref=self.ref)

    def __enter__(self) -> Snapshot:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"Snapshot(ref={self.ref!r}, path={str(self.path)!r}, {state})"


def open_snapshot(
    repo_root: Path | str,
    ref: str,
    *,
    track_upstream: bool = True,
    git: GitOps | None = None,
) -> Snapshot:
    """Materialize ``ref`` of the repository at ``repo_root``.

    When ``track_upstream`` is set and ``ref`` names a local branch with a
    configured upstream, the upstream is checked out instead.

    Raises:
        InvalidRevisionError: If the ref does not resolve to a commit
        SnapshotCreationError: If git is missing or the worktree cannot be added
    """
    if shutil.which("git") is None:
        raise SnapshotCreationError.git_not_found()

    git = git or GitOps(repo_root)
    target = git.resolve_target_ref(ref) if track_upstream else ref

    try:
        commit = git.verify_ref(target)
    except RefNotFoundError as e:
        raise InvalidRevisionError.not_found(target, e.diagnostic) from e

    snapshot = Snapshot(git, Path(tempfile.mkdtemp(prefix=SNAPSHOT_DIR_PREFIX)), target)
    try:
        git.add_detached_worktree(snapshot.path, commit)
    except WorktreeError as e:
        snapshot.close()
        raise SnapshotCreationError.worktree_failed(target, e.output) from e
    except BaseException:
        snapshot.close()
        raise

    log.debug("snapshot_created", ref=target, commit=commit[:12], path=str(snapshot.path))
    return snapshot
