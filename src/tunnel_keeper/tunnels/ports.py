"""Local port contention checks."""

import os
import socket

from ..common.logging import get_logger

logger = get_logger(__name__)


def is_port_busy(port: int, host: str = "") -> bool:
    """Check whether a local TCP port is occupied.

    The port is bound and released straight away. Any failure to bind counts
    as busy, which can over-report (e.g. missing privileges for low ports).
    The answer is only valid at the time of the call.

    Args:
        port: TCP port to probe
        host: Interface to bind, all interfaces if empty

    Returns:
        True if the port could not be acquired
    """
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        if os.name == "posix":
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, port))
            sock.listen(1)
        except OSError as e:
            logger.debug("Port probe failed", port=port, error=str(e))
            return True
    return False
