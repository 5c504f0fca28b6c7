"""Tunnel models using Pydantic for type safety and validation."""

from datetime import timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from ..common.utils import MAX_PORT, MIN_PORT, validate_non_empty_string


class TunnelKind(str, Enum):
    """Which command source a tunnel configuration uses."""

    K8S = "k8s"
    CUSTOM = "custom"
    UNKNOWN = "N/A"


class TunnelStatus(str, Enum):
    """Lifecycle states of a supervised tunnel."""

    # Never a settled state; reaching it means the supervisor is broken.
    UNDEFINED = "Undefined"
    # Initial state, nothing has been started yet.
    CLOSE = "Close"
    # Shown for one cycle between Close and Open.
    OPENING = "Opening"
    OPEN = "Open"
    ERROR = "Error"
    # Follows Error or Signal and reattempts to open the tunnel.
    REOPENING = "Reopening"
    PORT_BUSY = "PortBusy"
    SIGNAL = "Signal"
    # The process exited cleanly; what happened to it is beyond the event horizon.
    COOPER = "Cooper"


LAUNCHABLE_STATUSES = frozenset(
    {
        TunnelStatus.CLOSE,
        TunnelStatus.REOPENING,
        TunnelStatus.COOPER,
        TunnelStatus.PORT_BUSY,
    }
)


class RunState(str, Enum):
    """Whether a tunnel's supervision loop has been entered."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    STOPPED = "stopped"


class K8sInfo(BaseModel):
    """Everything required to run a ``kubectl port-forward`` command."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="forbid")

    context: str = Field(default="", description="kubectl context, current if empty")
    namespace: str = Field(description="Namespace of the target service")
    service: str = Field(description="Target, e.g. svc/postgres or pod/web-0")
    port: int = Field(ge=MIN_PORT, le=MAX_PORT, description="Remote port")

    @field_validator("namespace", "service")
    @classmethod
    def validate_required_text(cls, v: str, info: ValidationInfo) -> str:
        """Reject blank namespace and service names."""
        return validate_non_empty_string(v, info.field_name)


class TunnelConfig(BaseModel):
    """Declarative configuration of one tunnel.

    Exactly one of ``k8s`` or ``custom`` is expected. A config with neither is
    accepted here and fails when the supervisor tries to build its command.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="forbid")

    name: str = Field(description="Display name, not required to be unique")
    local_port: int = Field(ge=MIN_PORT, le=MAX_PORT, description="Local port to bind")
    k8s: K8sInfo | None = Field(default=None, description="kubectl port-forward target")
    custom: str | None = Field(default=None, description="Raw command line")

    @property
    def kind(self) -> TunnelKind:
        """Config variant in use; the k8s descriptor wins when both are set."""
        if self.k8s is not None:
            return TunnelKind.K8S
        if self.custom:
            return TunnelKind.CUSTOM
        return TunnelKind.UNKNOWN


class TunnelSnapshot(BaseModel):
    """Observable state of a tunnel copied at a single point in time."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: TunnelKind
    local_port: int
    pid: int | None = None
    status: TunnelStatus
    age: timedelta | None = None
    error: str = ""
