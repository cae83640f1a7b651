"""Subprocess execution service for pgprovisioner."""

import subprocess
from typing import Iterable, List, Optional, Sequence

from pgprovisioner.errors import CommandTimeoutError, ExecutionError, ProcessSpawnError
from pgprovisioner.models import CommandResult

MASK = "********"


class CommandRunner:
    """Runs external commands with consistent error handling.

    ``run`` inherits the caller's stdout/stderr and raises on a non-zero exit.
    ``run_capture`` buffers the output and returns it with the exit code.
    Both block until the child exits; ``default_timeout`` is unset unless the
    caller opts in.
    """

    def __init__(
        self,
        logger,
        default_timeout: Optional[float] = None,
        secrets: Optional[Iterable[str]] = None,
    ):
        self.logger = logger
        self.default_timeout = default_timeout
        self.secrets = [value for value in (secrets or []) if value]

    def _mask(self, text: str) -> str:
        for secret in self.secrets:
            text = text.replace(secret, MASK)
        return text

    def _mask_argument(self, part: str) -> str:
        # secrets only reach argv as "name=<secret>" variables
        name, separator, value = part.partition("=")
        for secret in self.secrets:
            if separator and value == secret and name.isidentifier():
                return f"{name}={MASK}"
        return part

    def _masked(self, cmd: Sequence[str]) -> List[str]:
        return [self._mask_argument(part) for part in cmd]

    def _spawn(
        self,
        cmd: List[str],
        capture_output: bool,
        input_text: Optional[str],
    ) -> subprocess.CompletedProcess:
        masked = self._masked(cmd)
        self.logger.debug("Executing: %s", " ".join(masked))

        try:
            return subprocess.run(
                cmd,
                text=True,
                input=input_text,
                capture_output=capture_output,
                timeout=self.default_timeout,
            )
        except FileNotFoundError as exc:
            raise ProcessSpawnError(
                masked, f"Required command not found: {cmd[0]}. Please install it and try again."
            ) from exc
        except PermissionError as exc:
            raise ProcessSpawnError(masked, f"Permission denied: {cmd[0]}.") from exc
        except subprocess.TimeoutExpired as exc:
            raise CommandTimeoutError(masked, self.default_timeout) from exc
        except OSError as exc:
            raise ProcessSpawnError(masked, str(exc)) from exc

    def run(self, cmd: List[str], input_text: Optional[str] = None) -> None:
        result = self._spawn(cmd, capture_output=False, input_text=input_text)
        if result.returncode != 0:
            raise ExecutionError(self._masked(cmd), result.returncode)

    def run_capture(self, cmd: List[str], input_text: Optional[str] = None) -> CommandResult:
        result = self._spawn(cmd, capture_output=True, input_text=input_text)

        stdout = result.stdout or ""
        if stdout:
            self.logger.debug("Command output: %s", self._mask(stdout.strip()))
        if result.returncode != 0 and result.stderr:
            self.logger.debug("Command stderr: %s", self._mask(result.stderr.strip()))

        return CommandResult(command=tuple(cmd), exit_code=result.returncode, output=stdout)
