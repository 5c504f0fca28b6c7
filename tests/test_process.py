"""Unit tests for TunnelProcess and ProcessOutcome."""

import signal
from unittest.mock import Mock, patch

import pytest

from tunnel_keeper.common.exceptions import LaunchError
from tunnel_keeper.tunnels.commands import TunnelCommand
from tunnel_keeper.tunnels.process import ProcessOutcome, TunnelProcess, describe_signal


class TestProcessOutcome:
    """Test rendering of process outcomes"""

    def test_clean_exit_has_no_error(self):
        outcome = ProcessOutcome(returncode=0, output="bye\n")
        assert outcome.error is None
        assert outcome.signal_name is None

    def test_exit_status_with_output(self):
        error = ProcessOutcome(returncode=2, output="boom\n").error
        assert str(error) == "boom: exit status 2"
        assert error.output == "boom"
        assert error.returncode == 2

    def test_exit_status_without_output(self):
        assert str(ProcessOutcome(returncode=1).error) == "exit status 1"

    def test_signal_termination(self):
        error = ProcessOutcome(returncode=-signal.SIGTERM).error
        assert str(error) == "signal: terminated"
        assert error.signal_name == "terminated"

    def test_describe_signal(self):
        assert describe_signal(signal.SIGKILL) == "killed"
        assert describe_signal(signal.SIGINT) == "interrupt"


class TestTunnelProcess:
    """Test cases for TunnelProcess with a mocked Popen"""

    @pytest.fixture
    def command(self):
        return TunnelCommand(program="sleep", args=("9999",))

    def test_not_started(self, command):
        process = TunnelProcess(command)
        assert process.pid is None
        assert process.poll_outcome() is None
        process.kill()  # no-op

    @patch("tunnel_keeper.tunnels.process.threading.Thread")
    @patch("subprocess.Popen")
    def test_start_spawns_in_new_session(self, mock_popen, mock_thread, command):
        mock_popen.return_value = Mock(pid=12345)

        process = TunnelProcess(command)
        process.start()

        assert process.pid == 12345
        args, kwargs = mock_popen.call_args
        assert args[0] == ["sleep", "9999"]
        assert kwargs["start_new_session"] is True
        assert kwargs["stderr"] is not None
        mock_thread.return_value.start.assert_called_once()

    @patch("subprocess.Popen")
    def test_start_failure_raises_launch_error(self, mock_popen, command):
        mock_popen.side_effect = FileNotFoundError("No such file or directory: 'sleep'")

        process = TunnelProcess(command)

        with pytest.raises(LaunchError, match="Failed to start sleep"):
            process.start()
        assert process.pid is None

    @patch("subprocess.Popen")
    def test_rejected_arguments_raise_launch_error(self, mock_popen, command):
        mock_popen.side_effect = ValueError("embedded null byte")

        process = TunnelProcess(command)

        with pytest.raises(LaunchError, match="embedded null byte"):
            process.start()
        assert process.pid is None

    @patch("tunnel_keeper.tunnels.process.threading.Thread")
    @patch("subprocess.Popen")
    def test_start_twice_fails(self, mock_popen, mock_thread, command):
        mock_popen.return_value = Mock(pid=12345)
        process = TunnelProcess(command)
        process.start()

        with pytest.raises(LaunchError):
            process.start()
        assert mock_popen.call_count == 1

    @patch("tunnel_keeper.tunnels.process.threading.Thread")
    @patch("subprocess.Popen")
    def test_waiter_publishes_outcome(self, mock_popen, mock_thread, command):
        mock_process = Mock(pid=12345, returncode=-9)
        mock_process.communicate.return_value = (b"Forwarding from 127.0.0.1:7000\n", None)
        mock_popen.return_value = mock_process

        process = TunnelProcess(command)
        process.start()
        process._wait()

        outcome = process.poll_outcome()
        assert outcome == ProcessOutcome(returncode=-9, output="Forwarding from 127.0.0.1:7000\n")
        assert process.poll_outcome() is None

    @patch("tunnel_keeper.tunnels.process.os.killpg")
    @patch("tunnel_keeper.tunnels.process.threading.Thread")
    @patch("subprocess.Popen")
    def test_kill_targets_process_group(self, mock_popen, mock_thread, mock_killpg, command):
        mock_popen.return_value = Mock(pid=12345)
        process = TunnelProcess(command)
        process.start()

        process.kill()

        mock_killpg.assert_called_once_with(12345, signal.SIGKILL)

    @patch("tunnel_keeper.tunnels.process.os.killpg")
    @patch("tunnel_keeper.tunnels.process.threading.Thread")
    @patch("subprocess.Popen")
    def test_kill_swallows_missing_process(self, mock_popen, mock_thread, mock_killpg, command):
        mock_popen.return_value = Mock(pid=12345)
        mock_killpg.side_effect = ProcessLookupError("No such process")
        process = TunnelProcess(command)
        process.start()

        process.kill()

    @patch("tunnel_keeper.tunnels.process.logger")
    @patch("tunnel_keeper.tunnels.process.os.killpg")
    @patch("tunnel_keeper.tunnels.process.threading.Thread")
    @patch("subprocess.Popen")
    def test_kill_logs_other_errors(
        self, mock_popen, mock_thread, mock_killpg, mock_logger, command
    ):
        mock_popen.return_value = Mock(pid=12345)
        mock_killpg.side_effect = PermissionError("Operation not permitted")
        process = TunnelProcess(command)
        process.start()

        process.kill()

        mock_logger.warning.assert_called_once()
