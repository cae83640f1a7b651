"""Domain errors for pgprovisioner."""

from typing import Iterable, Optional, Sequence


def format_command(command: Sequence[str]) -> str:
    return " ".join(command)


class ProvisionerError(RuntimeError):
    """Raised when provisioning cannot continue safely."""


class ExecutionError(ProvisionerError):
    """A spawned command exited with a non-zero status."""

    def __init__(self, command: Sequence[str], exit_code: int, detail: Optional[str] = None):
        self.command = tuple(command)
        self.exit_code = exit_code
        message = f"Command failed ({exit_code}): {format_command(self.command)}"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)


class CommandTimeoutError(ExecutionError):
    """A spawned command did not finish within the configured timeout; it has no exit code."""

    def __init__(self, command: Sequence[str], timeout: float):
        self.command = tuple(command)
        self.exit_code = None
        self.timeout = timeout
        ProvisionerError.__init__(
            self, f"Command timed out after {timeout}s: {format_command(self.command)}"
        )


class ProcessSpawnError(ProvisionerError):
    """The operating system could not start the child process."""

    def __init__(self, command: Sequence[str], reason: str):
        self.command = tuple(command)
        self.reason = reason
        super().__init__(f"Could not start command: {format_command(self.command)}. {reason}")


class ConfigurationError(ProvisionerError):
    """One or more required configuration values are missing or invalid."""

    def __init__(self, missing_fields: Iterable[str] = (), message: Optional[str] = None):
        self.missing_fields = tuple(missing_fields)
        if message is None:
            message = f"Missing required configuration value(s): {', '.join(self.missing_fields)}"
        super().__init__(message)
