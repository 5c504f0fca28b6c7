"""Tests for tunnel models."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from tunnel_keeper.tunnels.models import (
    K8sInfo,
    TunnelConfig,
    TunnelKind,
    TunnelSnapshot,
    TunnelStatus,
)


class TestTunnelConfig:
    """Test TunnelConfig validation"""

    def test_custom_config(self, custom_config):
        assert custom_config.kind == TunnelKind.CUSTOM
        assert custom_config.k8s is None

    def test_k8s_config(self, k8s_config):
        assert k8s_config.kind == TunnelKind.K8S
        assert k8s_config.k8s.context == "staging"

    def test_config_without_command_is_accepted(self, empty_config):
        assert empty_config.kind == TunnelKind.UNKNOWN

    def test_config_is_immutable(self, custom_config):
        with pytest.raises(ValidationError):
            custom_config.local_port = 9000

    @pytest.mark.parametrize("port", [0, 65536, -1])
    def test_invalid_local_port(self, port):
        with pytest.raises(ValidationError):
            TunnelConfig(name="bad", local_port=port, custom="sleep 1")

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            TunnelConfig(name="bad", local_port=80, custom="sleep 1", remote="x")

    def test_k8s_requires_namespace_and_service(self):
        with pytest.raises(ValidationError, match="namespace cannot be empty"):
            K8sInfo(namespace="  ", service="svc/a", port=80)

        with pytest.raises(ValidationError):
            K8sInfo(namespace="ns", port=80)

    def test_k8s_context_optional(self):
        info = K8sInfo(namespace="ns", service="svc/a", port=80)
        assert info.context == ""


class TestTunnelStatus:
    """Test status naming used by the status table"""

    def test_status_values_match_names(self):
        assert TunnelStatus.PORT_BUSY.value == "PortBusy"
        assert TunnelStatus.COOPER.value == "Cooper"
        assert TunnelStatus.CLOSE.value == "Close"


class TestTunnelSnapshot:
    """Test TunnelSnapshot"""

    def test_snapshot_is_frozen(self):
        snapshot = TunnelSnapshot(
            name="a",
            kind=TunnelKind.CUSTOM,
            local_port=7000,
            status=TunnelStatus.OPEN,
            age=timedelta(seconds=3),
        )

        with pytest.raises(ValidationError):
            snapshot.status = TunnelStatus.ERROR

    def test_snapshot_defaults(self):
        snapshot = TunnelSnapshot(
            name="a", kind=TunnelKind.UNKNOWN, local_port=7000, status=TunnelStatus.CLOSE
        )
        assert snapshot.pid is None
        assert snapshot.age is None
        assert snapshot.error == ""
