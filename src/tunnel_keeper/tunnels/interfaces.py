"""Protocol interfaces for the collaborators a tunnel supervisor depends on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .commands import TunnelCommand
    from .models import TunnelConfig
    from .process import ProcessOutcome


class CommandBuilderProtocol(Protocol):
    """Turns a tunnel configuration into a command."""

    def __call__(self, config: TunnelConfig) -> TunnelCommand:
        """Build the command, raising CommandBuildError if impossible."""
        ...


class PortProberProtocol(Protocol):
    """Answers whether a local TCP port is occupied."""

    def __call__(self, port: int) -> bool:
        """Return True if the port is busy."""
        ...


class TunnelProcessProtocol(Protocol):
    """A launched tunnel process."""

    @property
    def pid(self) -> int | None:
        """Process ID, None before start."""
        ...

    def start(self) -> None:
        """Spawn the process, raising LaunchError on failure."""
        ...

    def poll_outcome(self) -> ProcessOutcome | None:
        """Return the termination outcome without blocking, if there is one."""
        ...

    def kill(self) -> None:
        """Kill the process and its descendants."""
        ...


class ProcessFactoryProtocol(Protocol):
    """Creates unstarted tunnel processes."""

    def __call__(self, command: TunnelCommand) -> TunnelProcessProtocol:
        """Wrap the command in a process object."""
        ...
