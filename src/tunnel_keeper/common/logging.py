"""structlog setup for the supervisor.

Log lines go to stderr (and optionally a file) so they never interleave with
the status table on stdout.
"""

import logging
import sys
from typing import TextIO

import structlog
from structlog.typing import Processor

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "WARNING",
    json_format: bool = False,
    log_file: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Route structlog through the root logger.

    Args:
        level: Logging level name
        json_format: Render events as JSON instead of key=value text
        log_file: Also append log lines to this file
        stream: Console stream, stderr when omitted
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(level=level.upper(), format="%(message)s", handlers=handlers, force=True)

    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if json_format
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)  # type: ignore[no-any-return]
