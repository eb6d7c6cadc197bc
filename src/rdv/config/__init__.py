"""Config module exports."""

from rdv.config.loader import load_config
from rdv.config.models import (
    DiffConfig,
    LoggingConfig,
    LogOutputConfig,
    RdvConfig,
    RenderConfig,
    ValidateConfig,
)

__all__ = [
    "load_config",
    "DiffConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "RdvConfig",
    "RenderConfig",
    "ValidateConfig",
]
