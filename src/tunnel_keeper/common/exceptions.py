"""Custom exceptions for tunnel keeper."""


class TunnelKeeperError(Exception):
    """Base exception for all tunnel keeper errors."""
    pass


class ConfigurationError(TunnelKeeperError):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


class CommandBuildError(ConfigurationError):
    """Raised when no command can be derived from a tunnel configuration."""
    pass


class ProcessError(TunnelKeeperError):
    """Raised when tunnel process operations fail."""
    pass


class LaunchError(ProcessError):
    """Raised when a tunnel process cannot be spawned."""
    pass


class ProcessExitError(ProcessError):
    """A tunnel process terminated abnormally.

    The message mirrors what the process reported: captured output followed by
    either ``exit status <code>`` or ``signal: <name>``.
    """

    def __init__(
        self,
        message: str,
        returncode: int | None = None,
        signal_name: str | None = None,
        output: str = "",
    ):
        super().__init__(message)
        self.returncode = returncode
        self.signal_name = signal_name
        self.output = output


class TunnelStateError(TunnelKeeperError):
    """Raised when a tunnel reaches a state the supervisor cannot handle."""
    pass
