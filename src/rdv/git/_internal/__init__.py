"""Internal components for git operations - not part of public API."""

from rdv.git._internal.access import RepoAccess
from rdv.git._internal.errors import ErrorMapper, git_operation

__all__ = ["ErrorMapper", "RepoAccess", "git_operation"]
