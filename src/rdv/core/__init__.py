"""Core module exports."""

from rdv.core.errors import (
    ConfigError,
    DiffEngineError,
    ErrorCode,
    InternalError,
    InvalidRevisionError,
    NotARepositoryError,
    OutOfRepositoryError,
    RdvError,
    RenderError,
    SnapshotCreationError,
    SourceNotFoundError,
    ValidationError,
)
from rdv.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from rdv.core.progress import spinner

__all__ = [
    # Errors
    "ConfigError",
    "DiffEngineError",
    "ErrorCode",
    "InternalError",
    "InvalidRevisionError",
    "NotARepositoryError",
    "OutOfRepositoryError",
    "RdvError",
    "RenderError",
    "SnapshotCreationError",
    "SourceNotFoundError",
    "ValidationError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "spinner",
]
