"""Read-only existence checks used to skip already-provisioned resources."""

from pgprovisioner.constants import CLIENT_BINARY
from pgprovisioner.errors import ProvisionerError
from pgprovisioner.models import CommandResult, ProbeResult


class ExistenceProbes:
    """Best-effort probes that never raise.

    A probe that cannot reach a verdict returns ``ProbeResult.UNKNOWN``, which
    callers handle like ``ABSENT``: the worst case is a redundant creation
    attempt whose own error is surfaced.
    """

    def __init__(self, command_runner, sql_client, logger):
        self.command_runner = command_runner
        self.sql_client = sql_client
        self.logger = logger

    @staticmethod
    def classify(result: CommandResult) -> ProbeResult:
        if not result.ok:
            return ProbeResult.UNKNOWN
        if result.output.strip() == "1":
            return ProbeResult.EXISTS
        return ProbeResult.ABSENT

    def engine_installed(self) -> ProbeResult:
        try:
            result = self.command_runner.run_capture(["which", CLIENT_BINARY])
        except ProvisionerError as exc:
            self.logger.debug("Could not look up %s on PATH: %s", CLIENT_BINARY, exc)
            return ProbeResult.UNKNOWN
        return ProbeResult.EXISTS if result.ok else ProbeResult.ABSENT

    def role_exists(self, username: str) -> ProbeResult:
        try:
            result = self.sql_client.role_exists_query(username)
        except ProvisionerError as exc:
            self.logger.warning("Could not check PostgreSQL role '%s': %s", username, exc)
            return ProbeResult.UNKNOWN
        return self._log_unknown(self.classify(result), "role", username, result)

    def database_exists(self, name: str) -> ProbeResult:
        try:
            result = self.sql_client.database_exists_query(name)
        except ProvisionerError as exc:
            self.logger.warning("Could not check PostgreSQL database '%s': %s", name, exc)
            return ProbeResult.UNKNOWN
        return self._log_unknown(self.classify(result), "database", name, result)

    def _log_unknown(self, verdict: ProbeResult, kind: str, name: str, result: CommandResult) -> ProbeResult:
        if verdict is ProbeResult.UNKNOWN:
            self.logger.warning(
                "Could not check PostgreSQL %s '%s': query exited with status %s.",
                kind,
                name,
                result.exit_code,
            )
        return verdict
