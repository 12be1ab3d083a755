"""Core module exports."""

from gitoops.core.errors import (
    ConfigError,
    ConflictError,
    ErrorCode,
    ExternalToolError,
    GitOopsError,
    InternalError,
    ValidationError,
)
from gitoops.core.logging import (
    clear_operation_id,
    configure_logging,
    get_logger,
    get_operation_id,
    set_operation_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "ConflictError",
    "ErrorCode",
    "ExternalToolError",
    "GitOopsError",
    "InternalError",
    "ValidationError",
    # Logging
    "clear_operation_id",
    "configure_logging",
    "get_logger",
    "get_operation_id",
    "set_operation_id",
]
