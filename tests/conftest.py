"""Shared pytest fixtures for tunnel keeper tests."""

import socket
from datetime import datetime, timedelta
from unittest.mock import Mock

import pytest

from tunnel_keeper.common.settings import SupervisorSettings
from tunnel_keeper.tunnels.models import K8sInfo, TunnelConfig
from tunnel_keeper.tunnels.process import ProcessOutcome


class FakeProcess:
    """Stand-in for TunnelProcess driven by the test."""

    _next_pid = 1000

    def __init__(self, command):
        self.command = command
        self.pid = None
        self.started = False
        self.killed = False
        self._outcome = None

    def start(self):
        FakeProcess._next_pid += 1
        self.pid = FakeProcess._next_pid
        self.started = True

    def poll_outcome(self):
        outcome, self._outcome = self._outcome, None
        return outcome

    def kill(self):
        self.killed = True

    def finish(self, returncode: int, output: str = "") -> None:
        """Make the next poll report termination."""
        self._outcome = ProcessOutcome(returncode=returncode, output=output)


class FakeProcessFactory:
    """Records every process the supervisor creates."""

    def __init__(self):
        self.processes: list[FakeProcess] = []

    def __call__(self, command):
        process = FakeProcess(command)
        self.processes.append(process)
        return process

    @property
    def last(self) -> FakeProcess:
        return self.processes[-1]


class FakeClock:
    """Manually advanced clock."""

    def __init__(self):
        self.now = datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def settings():
    """Settings with a short cadence for loop tests."""
    return SupervisorSettings(retry_interval=0.01, refresh_interval=0.01)


@pytest.fixture
def custom_config():
    return TunnelConfig(name="alpha", local_port=7000, custom="sleep 9999")


@pytest.fixture
def k8s_config():
    return TunnelConfig(
        name="postgres",
        local_port=5432,
        k8s=K8sInfo(context="staging", namespace="data", service="svc/postgres", port=5433),
    )


@pytest.fixture
def empty_config():
    """Config carrying no command information."""
    return TunnelConfig(name="broken", local_port=7001)


@pytest.fixture
def process_factory():
    return FakeProcessFactory()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def port_free():
    """Port prober reporting every port as free."""
    return Mock(return_value=False)


@pytest.fixture
def free_port():
    """A TCP port that was free when the fixture ran."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]
