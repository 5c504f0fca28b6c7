"""Common utilities and shared functionality."""

from .exceptions import (
    CommandBuildError,
    ConfigurationError,
    LaunchError,
    ProcessError,
    ProcessExitError,
    TunnelKeeperError,
    TunnelStateError,
)
from .logging import get_logger, setup_logging
from .settings import SupervisorSettings
from .utils import (
    MAX_PORT,
    MIN_PORT,
    NOT_AVAILABLE,
    format_duration,
    truncate,
    validate_non_empty_string,
)

__all__ = [
    # Exceptions
    "TunnelKeeperError",
    "ConfigurationError",
    "CommandBuildError",
    "ProcessError",
    "LaunchError",
    "ProcessExitError",
    "TunnelStateError",
    # Logging
    "get_logger",
    "setup_logging",
    # Settings
    "SupervisorSettings",
    # Utils
    "validate_non_empty_string",
    "truncate",
    "format_duration",
    "MIN_PORT",
    "MAX_PORT",
    "NOT_AVAILABLE",
]
