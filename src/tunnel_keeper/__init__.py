"""Tunnel Keeper - keeps kubectl port-forwards and other local tunnels alive."""

__version__ = "0.3.0"

from .common.exceptions import (  # noqa: E402
    CommandBuildError,
    ConfigurationError,
    LaunchError,
    ProcessError,
    ProcessExitError,
    TunnelKeeperError,
    TunnelStateError,
)
from .common.logging import get_logger, setup_logging  # noqa: E402
from .common.settings import SupervisorSettings  # noqa: E402
from .config import load_tunnel_configs, parse_tunnel_configs  # noqa: E402
from .status import StatusReporter, render_table  # noqa: E402
from .tunnels import (  # noqa: E402
    K8sInfo,
    Tunnel,
    TunnelCommand,
    TunnelConfig,
    TunnelGroup,
    TunnelKind,
    TunnelProcess,
    TunnelSnapshot,
    TunnelStatus,
    build_command,
    is_port_busy,
    tunnel_group,
)

__all__ = [
    # Configuration
    "TunnelConfig",
    "K8sInfo",
    "SupervisorSettings",
    "load_tunnel_configs",
    "parse_tunnel_configs",
    # Supervision
    "Tunnel",
    "TunnelGroup",
    "tunnel_group",
    "TunnelStatus",
    "TunnelKind",
    "TunnelSnapshot",
    # Building blocks
    "TunnelCommand",
    "TunnelProcess",
    "build_command",
    "is_port_busy",
    # Status display
    "StatusReporter",
    "render_table",
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
]
