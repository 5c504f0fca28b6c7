"""Per-tunnel supervision state machine."""

import re
import threading
from collections.abc import Callable
from datetime import datetime, timedelta

from ..common.exceptions import (
    CommandBuildError,
    LaunchError,
    ProcessExitError,
    TunnelStateError,
)
from ..common.logging import get_logger
from ..common.settings import SupervisorSettings
from .commands import build_command
from .interfaces import (
    CommandBuilderProtocol,
    PortProberProtocol,
    ProcessFactoryProtocol,
    TunnelProcessProtocol,
)
from .models import (
    LAUNCHABLE_STATUSES,
    RunState,
    TunnelConfig,
    TunnelKind,
    TunnelSnapshot,
    TunnelStatus,
)
from .ports import is_port_busy
from .process import ProcessOutcome, TunnelProcess

logger = get_logger(__name__)

SIGNAL_PATTERN = re.compile(r"signal: ([a-z0-9 ]+)$")


def classify_outcome(
    outcome: ProcessOutcome,
) -> tuple[TunnelStatus, Exception | None]:
    """Map a process outcome to the state it leads to and the error to keep.

    Signal detection is best-effort: it relies on the error text ending in
    ``signal: <name>``.
    """
    error = outcome.error
    if error is None:
        return TunnelStatus.COOPER, None

    match = SIGNAL_PATTERN.search(str(error))
    if match:
        return TunnelStatus.SIGNAL, ProcessExitError(
            match.group(0),
            returncode=error.returncode,
            signal_name=match.group(1),
        )
    return TunnelStatus.ERROR, error


class Tunnel:
    """A supervised tunnel.

    The supervision loop entered through ``run`` is the only writer. Every
    read and every evaluation step holds the tunnel's lock, so observers never
    see a half-updated tunnel.
    """

    def __init__(
        self,
        config: TunnelConfig,
        settings: SupervisorSettings | None = None,
        *,
        command_builder: CommandBuilderProtocol = build_command,
        port_prober: PortProberProtocol = is_port_busy,
        process_factory: ProcessFactoryProtocol = TunnelProcess,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config
        self.settings = settings or SupervisorSettings()
        self._command_builder = command_builder
        self._port_prober = port_prober
        self._process_factory = process_factory
        self._clock = clock

        self._lock = threading.Lock()
        self._status = TunnelStatus.CLOSE
        self._process: TunnelProcessProtocol | None = None
        self._started_at: datetime | None = None
        self._last_error: Exception | None = None
        self._run_state = RunState.NOT_STARTED
        self._run_state_lock = threading.Lock()

        self._handlers: dict[TunnelStatus, Callable[[], None]] = {
            **{status: self._launch for status in LAUNCHABLE_STATUSES},
            TunnelStatus.OPENING: self._enter_open,
            TunnelStatus.OPEN: self._keep_open,
            TunnelStatus.ERROR: self._enter_reopening,
            TunnelStatus.SIGNAL: self._enter_reopening,
        }

    # Observation API

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def kind(self) -> TunnelKind:
        return self.config.kind

    @property
    def local_port(self) -> int:
        return self.config.local_port

    @property
    def status(self) -> TunnelStatus:
        with self._lock:
            return self._status

    @property
    def pid(self) -> int | None:
        """PID of the live tunnel process, None if there is none."""
        with self._lock:
            return self._pid()

    @property
    def age(self) -> timedelta | None:
        """How long the tunnel has been Open, None in any other state."""
        with self._lock:
            return self._age()

    @property
    def error(self) -> str:
        """Message of the last failure, empty if there is none."""
        with self._lock:
            return self._error_text()

    @property
    def run_state(self) -> RunState:
        with self._run_state_lock:
            return self._run_state

    def snapshot(self) -> TunnelSnapshot:
        """Copy every observable field under a single lock acquisition."""
        with self._lock:
            return TunnelSnapshot(
                name=self.config.name,
                kind=self.config.kind,
                local_port=self.config.local_port,
                pid=self._pid(),
                status=self._status,
                age=self._age(),
                error=self._error_text(),
            )

    def _pid(self) -> int | None:
        if self._process is None:
            return None
        return self._process.pid

    def _age(self) -> timedelta | None:
        if self._status is not TunnelStatus.OPEN or self._started_at is None:
            return None
        elapsed = self._clock() - self._started_at
        # Halves round up, not to even.
        return timedelta(seconds=int(max(0.0, elapsed.total_seconds()) + 0.5))

    def _error_text(self) -> str:
        if self._last_error is None:
            return ""
        return str(self._last_error)

    # Supervision loop

    def run(self, cancel: threading.Event) -> bool:
        """Supervise the tunnel until ``cancel`` is set.

        Only the first call enters the loop; later calls, concurrent or not,
        return False straight away.

        Args:
            cancel: Shared cancellation signal

        Returns:
            True if this call ran the supervision loop
        """
        with self._run_state_lock:
            if self._run_state is not RunState.NOT_STARTED:
                logger.debug("Tunnel loop already entered", tunnel=self.name)
                return False
            self._run_state = RunState.RUNNING

        logger.info("Supervising tunnel", tunnel=self.name, kind=self.kind.value, port=self.local_port)
        try:
            while not cancel.is_set():
                self.step()
                cancel.wait(self.settings.retry_interval)
        except Exception as e:
            logger.exception("Tunnel loop crashed", tunnel=self.name)
            with self._lock:
                self._last_error = e
                self._set_status(TunnelStatus.ERROR)
            raise
        finally:
            self.shutdown()
        return True

    def step(self) -> None:
        """Run one supervision iteration.

        A process outcome observed in this iteration is classified and that
        is the whole step; otherwise the current status decides what to do.
        """
        with self._lock:
            outcome = self._process.poll_outcome() if self._process is not None else None
            if outcome is not None:
                self._handle_outcome(outcome)
                return

            handler = self._handlers.get(self._status)
            if handler is None:
                raise TunnelStateError(
                    f"Tunnel {self.name} reached unexpected status {self._status.value}"
                )
            handler()

    def shutdown(self) -> None:
        """Kill the tunnel process, if any, and mark the loop stopped."""
        with self._lock:
            if self._process is not None:
                logger.info("Stopping tunnel process", tunnel=self.name, pid=self._process.pid)
                self._process.kill()
        with self._run_state_lock:
            self._run_state = RunState.STOPPED
        logger.debug("Tunnel loop stopped", tunnel=self.name)

    # Transitions, called with the lock held

    def _set_status(self, status: TunnelStatus) -> None:
        if status is not self._status:
            logger.info(
                "Tunnel status changed",
                tunnel=self.name,
                previous=self._status.value,
                status=status.value,
            )
        self._status = status

    def _handle_outcome(self, outcome: ProcessOutcome) -> None:
        status, error = classify_outcome(outcome)
        logger.info(
            "Tunnel process terminated",
            tunnel=self.name,
            returncode=outcome.returncode,
            error=str(error) if error else None,
        )
        self._process = None
        if error is not None:
            self._last_error = error
        self._set_status(status)

    def _launch(self) -> None:
        retrying = self._status is TunnelStatus.REOPENING

        if self._port_prober(self.config.local_port):
            self._set_status(TunnelStatus.PORT_BUSY)
            return

        try:
            command = self._command_builder(self.config)
        except CommandBuildError as e:
            self._fail(CommandBuildError(f"get command: {e}"))
            return

        process = self._process_factory(command)
        try:
            process.start()
        except LaunchError as e:
            self._fail(e)
            return

        self._process = process
        logger.info("Tunnel process launched", tunnel=self.name, pid=process.pid, command=str(command))

        if retrying:
            # Already known to work; skip the Opening display step.
            self._enter_open()
        else:
            self._set_status(TunnelStatus.OPENING)

    def _fail(self, error: Exception) -> None:
        logger.warning("Tunnel launch failed", tunnel=self.name, error=str(error))
        self._last_error = error
        self._set_status(TunnelStatus.ERROR)

    def _enter_open(self) -> None:
        self._started_at = self._clock()
        self._last_error = None
        self._set_status(TunnelStatus.OPEN)

    def _keep_open(self) -> None:
        pass

    def _enter_reopening(self) -> None:
        self._set_status(TunnelStatus.REOPENING)
