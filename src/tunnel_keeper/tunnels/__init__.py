"""Tunnel supervision functionality."""

from .commands import TunnelCommand, build_command, custom_command, kubectl_command
from .group import TunnelGroup, tunnel_group
from .interfaces import (
    CommandBuilderProtocol,
    PortProberProtocol,
    ProcessFactoryProtocol,
    TunnelProcessProtocol,
)
from .models import (
    K8sInfo,
    RunState,
    TunnelConfig,
    TunnelKind,
    TunnelSnapshot,
    TunnelStatus,
)
from .ports import is_port_busy
from .process import ProcessOutcome, TunnelProcess
from .supervisor import Tunnel, classify_outcome

__all__ = [
    # Models
    "K8sInfo",
    "TunnelConfig",
    "TunnelKind",
    "TunnelStatus",
    "TunnelSnapshot",
    "RunState",
    # Commands
    "TunnelCommand",
    "build_command",
    "kubectl_command",
    "custom_command",
    # Processes and ports
    "TunnelProcess",
    "ProcessOutcome",
    "is_port_busy",
    # Supervision
    "Tunnel",
    "TunnelGroup",
    "tunnel_group",
    "classify_outcome",
    # Protocols
    "CommandBuilderProtocol",
    "PortProberProtocol",
    "ProcessFactoryProtocol",
    "TunnelProcessProtocol",
]
