"""Config module exports."""

from gitoops.config.loader import load_config
from gitoops.config.models import (
    GitConfig,
    LoggingConfig,
    LogOutputConfig,
    OopsConfig,
    WorkflowDefaults,
)

__all__ = [
    "load_config",
    "GitConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "OopsConfig",
    "WorkflowDefaults",
]
