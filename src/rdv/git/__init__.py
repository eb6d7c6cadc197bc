"""Git operations module."""

from rdv.git.errors import GitCommandError, GitError, RefNotFoundError, WorktreeError
from rdv.git.ops import GitOps
from rdv.git.snapshot import Snapshot, open_snapshot

__all__ = [
    "GitOps",
    "Snapshot",
    "open_snapshot",
    # Errors
    "GitCommandError",
    "GitError",
    "RefNotFoundError",
    "WorktreeError",
]
