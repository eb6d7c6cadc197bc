"""rdv error types with typed error codes.

Error code ranges:
- 1xxx: User input (path, repository, revision)
- 2xxx: Config
- 3xxx: Snapshot
- 4xxx: Render
- 5xxx: Validation
- 6xxx: Diff
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # User input (1xxx)
    OUT_OF_REPOSITORY = 1001
    NOT_A_REPOSITORY = 1002
    INVALID_REVISION = 1003

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Snapshot (3xxx)
    SNAPSHOT_CREATION_FAILED = 3001
    GIT_NOT_FOUND = 3002

    # Render (4xxx)
    RENDER_FAILED = 4001
    SOURCE_NOT_FOUND = 4002

    # Validation (5xxx)
    VALIDATION_FAILED = 5001

    # Diff (6xxx)
    DIFF_PARSE_ERROR = 6001

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


_INPUT_STAGES: dict[ErrorCode, str] = {
    ErrorCode.OUT_OF_REPOSITORY: "path",
    ErrorCode.NOT_A_REPOSITORY: "repository",
    ErrorCode.INVALID_REVISION: "revision",
}

_STAGES: dict[int, str] = {
    1: "input",
    2: "config",
    3: "snapshot",
    4: "render",
    5: "validate",
    6: "diff",
    9: "internal",
}


@dataclass(eq=False)
class RdvError(Exception):
    """Base error with structured context for diagnostics and logs."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'INVALID_REVISION')."""
        return self.code.name

    @property
    def stage(self) -> str:
        """Pipeline stage the error belongs to, derived from the code range."""
        if self.code in _INPUT_STAGES:
            return _INPUT_STAGES[self.code]
        return _STAGES.get(self.code.value // 1000, "internal")

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured logging."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class OutOfRepositoryError(RdvError):
    """Render path escapes the repository root."""

    @classmethod
    def for_path(cls, user_path: str, absolute: str, repo_root: str) -> "OutOfRepositoryError":
        return cls(
            code=ErrorCode.OUT_OF_REPOSITORY,
            message=(
                f"the provided path '{user_path}' (resolves to '{absolute}') "
                f"is outside the git repository root '{repo_root}'"
            ),
            details={"path": user_path, "absolute": absolute, "repo_root": repo_root},
        )


class NotARepositoryError(RdvError):
    """Current directory is not inside a git repository."""

    @classmethod
    def for_path(cls, path: str) -> "NotARepositoryError":
        return cls(
            code=ErrorCode.NOT_A_REPOSITORY,
            message=(
                f"failed to find git repo root from {path}. "
                "Make sure you are running this inside a git repository"
            ),
            details={"path": path},
        )


class InvalidRevisionError(RdvError):
    """Target revision does not resolve to an object in the repository."""

    @classmethod
    def not_found(cls, ref: str, diagnostic: str) -> "InvalidRevisionError":
        message = f"invalid or non-existent ref {ref!r}"
        if diagnostic:
            message = f"{message}: {diagnostic}"
        return cls(
            code=ErrorCode.INVALID_REVISION,
            message=message,
            details={"ref": ref, "diagnostic": diagnostic},
        )


class ConfigError(RdvError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class SnapshotCreationError(RdvError):
    """Linked worktree for the target revision could not be created."""

    @classmethod
    def worktree_failed(cls, ref: str, output: str) -> "SnapshotCreationError":
        return cls(
            code=ErrorCode.SNAPSHOT_CREATION_FAILED,
            message=f"failed to create worktree for '{ref}': {output}",
            details={"ref": ref, "output": output},
        )

    @classmethod
    def git_not_found(cls) -> "SnapshotCreationError":
        return cls(
            code=ErrorCode.GIT_NOT_FOUND,
            message="git not found in PATH",
        )


class RenderError(RdvError):
    """Renderer failed to turn a source directory into manifests."""

    @classmethod
    def failed(cls, path: str, reason: str, *, side: str | None = None) -> "RenderError":
        where = f" in {side} ref" if side else ""
        return cls(
            code=ErrorCode.RENDER_FAILED,
            message=f"failed to render path{where} {path}: {reason}",
            details={"path": path, "reason": reason, "side": side},
        )

    def on_side(self, side: str) -> "RenderError":
        """The same failure, naming the ref side it happened on."""
        return RenderError.failed(
            str(self.details.get("path", "")),
            str(self.details.get("reason", self.message)),
            side=side,
        )


class SourceNotFoundError(RenderError):
    """Path does not correspond to a renderable source at this revision."""

    @classmethod
    def for_path(cls, path: str) -> "SourceNotFoundError":
        return cls(
            code=ErrorCode.SOURCE_NOT_FOUND,
            message=(
                f"{path} is not a valid Helm Chart or Kustomization. "
                "Path may not exist in target ref"
            ),
            details={"path": path},
        )


class ValidationError(RdvError):
    """Rendered manifests failed schema validation."""

    @classmethod
    def invalid_manifests(cls, problems: list[str]) -> "ValidationError":
        listing = "\n".join(problems)
        return cls(
            code=ErrorCode.VALIDATION_FAILED,
            message=f"manifest validation failed:\n{listing}",
            details={"problems": problems},
        )

    @classmethod
    def validator_failed(cls, reason: str) -> "ValidationError":
        return cls(
            code=ErrorCode.VALIDATION_FAILED,
            message=f"error validating supplied manifest: {reason}",
            details={"reason": reason},
        )


class DiffEngineError(RdvError):
    """Diff strategy could not process its input."""

    @classmethod
    def unparseable(cls, label: str, reason: str) -> "DiffEngineError":
        return cls(
            code=ErrorCode.DIFF_PARSE_ERROR,
            message=f"could not parse YAML from {label}: {reason}",
            details={"label": label, "reason": reason},
        )


class InternalError(RdvError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
