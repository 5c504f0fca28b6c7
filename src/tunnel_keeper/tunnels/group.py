import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from types import TracebackType
from typing import Any, Optional, Type

from ..common.logging import get_logger
from ..common.settings import SupervisorSettings
from .models import TunnelConfig, TunnelSnapshot
from .supervisor import Tunnel

logger = get_logger(__name__)


class TunnelGroup:
    """Runs one supervision loop per tunnel and coordinates their shutdown"""

    def __init__(
        self,
        configs: Sequence[TunnelConfig],
        settings: Optional[SupervisorSettings] = None,
        cancel: Optional[threading.Event] = None,
        **tunnel_kwargs: Any,
    ):
        self.settings = settings or SupervisorSettings()
        self.cancel = cancel or threading.Event()
        self.tunnels: list[Tunnel] = [
            Tunnel(config, self.settings, **tunnel_kwargs) for config in configs
        ]
        self._threads: list[threading.Thread] = []

    def start(self) -> 'TunnelGroup':
        """Start a supervision thread for every tunnel (chainable)"""
        if self._threads:
            logger.debug("Tunnel group already started")
            return self

        for index, tunnel in enumerate(self.tunnels):
            thread = threading.Thread(
                target=tunnel.run,
                args=(self.cancel,),
                name=f"tunnel-{index}-{tunnel.name}",
                daemon=True,
            )
            self._threads.append(thread)
            thread.start()
        logger.info("Tunnel group started", tunnels=len(self.tunnels))
        return self

    def stop(self) -> None:
        """Signal every supervision loop to kill its process and return"""
        self.cancel.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for every supervision loop to return

        Returns:
            True if all loops have returned
        """
        for thread in self._threads:
            thread.join(timeout)
        alive = [thread.name for thread in self._threads if thread.is_alive()]
        if alive:
            logger.warning("Tunnel loops still running", threads=alive)
            return False
        logger.info("Tunnel group stopped")
        return True

    def wait(self) -> None:
        """Block until cancellation, then until every loop has returned"""
        self.cancel.wait()
        self.join()

    def snapshot(self) -> list[TunnelSnapshot]:
        """Observable state of every tunnel, in configuration order"""
        return [tunnel.snapshot() for tunnel in self.tunnels]

    def __enter__(self) -> 'TunnelGroup':
        return self.start()

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        self.stop()
        self.join()

    def __len__(self) -> int:
        return len(self.tunnels)

    def __iter__(self) -> Iterator[Tunnel]:
        return iter(self.tunnels)


@contextmanager
def tunnel_group(
    configs: Sequence[TunnelConfig],
    retry_interval: float = 2.0,
    **settings_kwargs: Any,
) -> Iterator[TunnelGroup]:
    """Supervise tunnels for the duration of a with block"""
    settings = SupervisorSettings(retry_interval=retry_interval, **settings_kwargs)

    with TunnelGroup(configs, settings) as group:
        yield group
