"""Terminal status table for a group of supervised tunnels."""

import threading
from collections.abc import Iterable

from rich.console import Console
from rich.live import Live
from rich.table import Table

from .common.logging import get_logger
from .common.utils import NOT_AVAILABLE, format_duration, truncate
from .tunnels.group import TunnelGroup
from .tunnels.models import TunnelSnapshot, TunnelStatus

logger = get_logger(__name__)

NAME_WIDTH = 16

STATUS_STYLES = {
    TunnelStatus.OPEN: "green",
    TunnelStatus.OPENING: "cyan",
    TunnelStatus.REOPENING: "cyan",
    TunnelStatus.PORT_BUSY: "yellow",
    TunnelStatus.COOPER: "yellow",
    TunnelStatus.ERROR: "red",
    TunnelStatus.SIGNAL: "red",
}


def render_row(snapshot: TunnelSnapshot) -> list[str]:
    """Format one snapshot as table cells"""
    pid = str(snapshot.pid) if snapshot.pid else NOT_AVAILABLE
    age = (
        format_duration(snapshot.age.total_seconds())
        if snapshot.age is not None
        else NOT_AVAILABLE
    )
    return [
        truncate(snapshot.name, NAME_WIDTH),
        snapshot.kind.value,
        str(snapshot.local_port),
        pid,
        age,
        snapshot.status.value,
        snapshot.error,
    ]


def render_table(snapshots: Iterable[TunnelSnapshot]) -> Table:
    """Build the status table for a set of snapshots"""
    table = Table(box=None, pad_edge=False, header_style="bold")
    table.add_column("NAME", min_width=NAME_WIDTH, no_wrap=True)
    table.add_column("TYPE", min_width=6)
    table.add_column("PORT", min_width=6)
    table.add_column("PID", min_width=8)
    table.add_column("AGE", min_width=8)
    table.add_column("STATUS", min_width=10)
    table.add_column("ERROR", overflow="fold")

    for snapshot in snapshots:
        table.add_row(*render_row(snapshot), style=STATUS_STYLES.get(snapshot.status))
    return table


class StatusReporter:
    """Periodically redraws the status of every tunnel in a group"""

    def __init__(
        self,
        group: TunnelGroup,
        refresh_interval: float | None = None,
        console: Console | None = None,
    ):
        self.group = group
        self.refresh_interval = refresh_interval or group.settings.refresh_interval
        self.console = console or Console()
        self._thread: threading.Thread | None = None

    def render(self) -> Table:
        return render_table(self.group.snapshot())

    def run(self, cancel: threading.Event) -> None:
        """Redraw the table until cancellation"""
        logger.debug("Status reporter started", refresh_interval=self.refresh_interval)
        with Live(
            self.render(),
            console=self.console,
            auto_refresh=False,
            redirect_stdout=False,
            redirect_stderr=False,
        ) as live:
            while not cancel.wait(self.refresh_interval):
                live.update(self.render(), refresh=True)
        logger.debug("Status reporter stopped")

    def start(self, cancel: threading.Event) -> threading.Thread:
        """Run the reporter in a background thread"""
        self._thread = threading.Thread(
            target=self.run, args=(cancel,), name="status-reporter", daemon=True
        )
        self._thread.start()
        return self._thread

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)
