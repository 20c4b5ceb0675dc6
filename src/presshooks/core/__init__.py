"""Core presshooks utilities.

This module exports configuration and logging helpers used throughout
the package.
"""

from presshooks.core.config import Settings, get_settings
from presshooks.core.logging import (
    LoggingContext,
    clear_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "LoggingContext",
    "clear_context",
]
