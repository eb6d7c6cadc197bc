"""Git module error types.

These stay inside the git layer; the snapshot layer translates them into
the user-facing errors in rdv.core.errors.
"""


class GitError(Exception):
    """Base error for git operations."""

    pass


class RefNotFoundError(GitError):
    """Reference (branch, tag, commit) not found."""

    def __init__(self, ref: str, diagnostic: str = "") -> None:
        detail = f": {diagnostic}" if diagnostic else ""
        super().__init__(f"Reference not found: {ref}{detail}")
        self.ref = ref
        self.diagnostic = diagnostic


class GitCommandError(GitError):
    """A git subprocess exited non-zero."""

    def __init__(self, args: list[str], returncode: int, output: str) -> None:
        super().__init__(f"git {' '.join(args)} failed ({returncode}): {output}")
        self.args_list = args
        self.returncode = returncode
        self.output = output


# =============================================================================
# Worktree Errors
# =============================================================================


class WorktreeError(GitError):
    """Worktree operation failed."""

    def __init__(self, operation: str, path: str, output: str) -> None:
        super().__init__(f"Worktree {operation} failed for {path}: {output}")
        self.operation = operation
        self.path = path
        self.output = output
