"""Command building for supported tunnel configurations."""

from pydantic import BaseModel, ConfigDict, Field

from ..common.exceptions import CommandBuildError
from .models import K8sInfo, TunnelConfig

KUBECTL_BINARY = "kubectl"


class TunnelCommand(BaseModel):
    """Executable and arguments establishing a tunnel."""

    model_config = ConfigDict(frozen=True)

    program: str = Field(min_length=1, description="Executable name or path")
    args: tuple[str, ...] = Field(default=(), description="Arguments, passed verbatim")

    @property
    def argv(self) -> list[str]:
        """Full argument vector suitable for subprocess."""
        return [self.program, *self.args]

    def __str__(self) -> str:
        return " ".join(self.argv)


def kubectl_command(info: K8sInfo, local_port: int) -> TunnelCommand:
    """Build a ``kubectl port-forward`` invocation.

    Args:
        info: Cluster-forward descriptor
        local_port: Local port to forward from

    Returns:
        Command forwarding ``local_port`` to ``info.port`` on the service
    """
    args = ["port-forward", "-n", info.namespace]
    if info.context:
        args.extend(["--context", info.context])
    args.extend([info.service, f"{local_port}:{info.port}"])
    return TunnelCommand(program=KUBECTL_BINARY, args=tuple(args))


def custom_command(command_line: str) -> TunnelCommand:
    """Split a raw command line on whitespace. No shell quoting is honoured."""
    parts = command_line.split()
    if not parts:
        raise CommandBuildError("custom command is empty")
    return TunnelCommand(program=parts[0], args=tuple(parts[1:]))


def build_command(config: TunnelConfig) -> TunnelCommand:
    """Derive the command that establishes the configured tunnel.

    This is deterministic and performs no I/O.

    Args:
        config: Tunnel configuration

    Returns:
        The command to launch

    Raises:
        CommandBuildError: If the config carries no command information
    """
    if config.k8s is not None:
        return kubectl_command(config.k8s, config.local_port)
    if config.custom and config.custom.strip():
        return custom_command(config.custom)
    raise CommandBuildError("config is missing command information")
