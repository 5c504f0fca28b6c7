"""Process management for individual tunnels."""

import os
import queue
import signal
import subprocess
import threading
from dataclasses import dataclass

from ..common.exceptions import LaunchError, ProcessExitError
from ..common.logging import get_logger
from .commands import TunnelCommand

logger = get_logger(__name__)


def describe_signal(signum: int) -> str:
    """Lower-case human description of a signal, e.g. ``killed``."""
    description = signal.strsignal(signum)
    if description:
        # Some platforms append the number, e.g. "Killed: 9".
        return description.split(":")[0].lower()
    try:
        return signal.Signals(signum).name.lower()
    except ValueError:
        return f"signal {signum}"


@dataclass(frozen=True)
class ProcessOutcome:
    """How a tunnel process terminated."""

    returncode: int
    output: str = ""

    @property
    def signal_name(self) -> str | None:
        """Description of the terminating signal, None for a normal exit."""
        if self.returncode < 0:
            return describe_signal(-self.returncode)
        return None

    @property
    def error(self) -> ProcessExitError | None:
        """Error describing an abnormal termination, None for exit code 0."""
        if self.returncode == 0:
            return None

        signal_name = self.signal_name
        if signal_name is not None:
            reason = f"signal: {signal_name}"
        else:
            reason = f"exit status {self.returncode}"

        output = self.output.strip()
        message = f"{output}: {reason}" if output else reason
        return ProcessExitError(
            message,
            returncode=self.returncode,
            signal_name=signal_name,
            output=output,
        )


class TunnelProcess:
    """Runs one tunnel command as a child process in its own process group.

    Combined stdout/stderr is collected by a waiter thread which posts exactly
    one ``ProcessOutcome`` when the child ends. ``poll_outcome`` never blocks.
    """

    def __init__(self, command: TunnelCommand):
        self.command = command
        self._process: subprocess.Popen[bytes] | None = None
        self._outcomes: queue.Queue[ProcessOutcome] = queue.Queue(maxsize=1)
        self._waiter: threading.Thread | None = None

    @property
    def pid(self) -> int | None:
        """Get process ID once started"""
        if self._process is None:
            return None
        return self._process.pid

    def start(self) -> None:
        """Spawn the process and its waiter thread.

        Raises:
            LaunchError: If the executable cannot be spawned or its
                arguments are rejected
        """
        if self._process is not None:
            raise LaunchError(f"Process already started: {self.command}")

        try:
            self._process = subprocess.Popen(
                self.command.argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                start_new_session=True,
            )
        except (OSError, ValueError) as e:
            # ValueError covers arguments Popen rejects, e.g. embedded NUL bytes.
            raise LaunchError(f"Failed to start {self.command.program}: {e}") from e

        logger.debug("Tunnel process spawned", command=str(self.command), pid=self._process.pid)
        self._waiter = threading.Thread(
            target=self._wait,
            name=f"tunnel-process-{self._process.pid}",
            daemon=True,
        )
        self._waiter.start()

    def _wait(self) -> None:
        """Collect output until the child exits, then publish its outcome."""
        assert self._process is not None
        output, _ = self._process.communicate()
        outcome = ProcessOutcome(
            returncode=self._process.returncode,
            output=(output or b"").decode(errors="replace"),
        )
        logger.debug("Tunnel process ended", pid=self._process.pid, returncode=outcome.returncode)
        self._outcomes.put(outcome)

    def poll_outcome(self) -> ProcessOutcome | None:
        """Return the termination outcome if the process has ended."""
        try:
            return self._outcomes.get_nowait()
        except queue.Empty:
            return None

    def wait(self, timeout: float | None = None) -> ProcessOutcome | None:
        """Block until the process ends. Returns None on timeout."""
        try:
            return self._outcomes.get(timeout=timeout)
        except queue.Empty:
            return None

    def kill(self) -> None:
        """Kill the whole process group with SIGKILL.

        A process that is already gone is not an error; any other failure is
        logged and otherwise ignored.
        """
        if self._process is None:
            return

        pid = self._process.pid
        try:
            os.killpg(pid, signal.SIGKILL)
            logger.debug("Killed tunnel process group", pid=pid)
        except ProcessLookupError:
            logger.debug("Tunnel process already gone", pid=pid)
        except OSError as e:
            logger.warning("Error while killing tunnel process", pid=pid, error=str(e))
