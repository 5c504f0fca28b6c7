"""CLI entrypoint for tunnel keeper."""

from __future__ import annotations

import argparse
import signal
import sys
import threading
from collections.abc import Sequence
from types import FrameType

from pydantic import ValidationError

from . import __version__
from .common.exceptions import ConfigurationError
from .common.logging import get_logger, setup_logging
from .common.settings import SupervisorSettings
from .config import load_tunnel_configs
from .status import StatusReporter
from .tunnels.group import TunnelGroup

logger = get_logger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM, signal.SIGHUP)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tunnel-keeper",
        description="Keep kubectl port-forwards and other local tunnels alive.",
    )
    parser.add_argument("config", help="JSON file listing the tunnels to supervise")
    parser.add_argument("--version", action="version", version=f"tunnel-keeper version {__version__}")
    parser.add_argument("--retry-interval", type=float, default=2.0, help="seconds between supervision iterations")
    parser.add_argument("--refresh-interval", type=float, default=5.0, help="seconds between status table redraws")
    parser.add_argument("--log-level", default="WARNING", help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    parser.add_argument("--log-file", default=None, help="also write logs to this file")
    parser.add_argument("--json-logs", action="store_true", help="emit JSON formatted logs")
    return parser


def install_signal_handlers(cancel: threading.Event) -> None:
    """Set ``cancel`` on SIGINT, SIGTERM or SIGHUP."""

    def _handler(_signum: int, _frame: FrameType | None) -> None:
        # Only set the event here; logging takes locks.
        cancel.set()

    for signum in SHUTDOWN_SIGNALS:
        signal.signal(signum, _handler)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = SupervisorSettings(
            retry_interval=args.retry_interval,
            refresh_interval=args.refresh_interval,
            log_level=args.log_level,
            json_logs=args.json_logs,
            log_file=args.log_file,
        )
    except ValidationError as e:
        print(f"invalid arguments: {e}", file=sys.stderr)
        return 2

    setup_logging(level=settings.log_level, json_format=settings.json_logs, log_file=settings.log_file)

    try:
        configs = load_tunnel_configs(args.config)
    except ConfigurationError as e:
        logger.error("Cannot load tunnel configs", path=args.config, error=str(e))
        print(e, file=sys.stderr)
        return 1

    cancel = threading.Event()
    install_signal_handlers(cancel)

    group = TunnelGroup(configs, settings, cancel=cancel)
    reporter = StatusReporter(group)
    group.start()
    reporter.start(cancel)

    # Short waits keep the main thread responsive to signal handlers.
    while not cancel.wait(0.5):
        pass
    logger.info("Shutdown requested", tunnels=len(group))

    reporter.join(timeout=settings.refresh_interval)
    print("\nWaiting for processes to end")
    group.join()
    print("Done")
    return 0


if __name__ == "__main__":
    sys.exit(main())
