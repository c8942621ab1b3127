"""Shared utilities: exception taxonomy and logging helpers."""

from .errors import (
    BoundaryConflictError,
    ConfigError,
    FdmError,
    SolveError,
    StateError,
)
from .log import configure_logging, get_logger

__all__ = [
    # Errors
    "FdmError",
    "ConfigError",
    "BoundaryConflictError",
    "StateError",
    "SolveError",
    # Logging
    "get_logger",
    "configure_logging",
]
