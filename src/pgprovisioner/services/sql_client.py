"""psql command builder for statements issued as the PostgreSQL superuser."""

from typing import Dict, List, Tuple

from pgprovisioner.constants import CLIENT_BINARY, SUPERUSER_ACCOUNT
from pgprovisioner.errors import ConfigurationError
from pgprovisioner.models import CommandResult

ROLE_EXISTS_SQL = "SELECT 1 FROM pg_roles WHERE rolname = :'name';"
DATABASE_EXISTS_SQL = "SELECT 1 FROM pg_database WHERE datname = :'name';"
CREATE_ROLE_SQL = "CREATE USER :\"username\" WITH PASSWORD :'password';"
CREATE_DATABASE_SQL = "CREATE DATABASE :\"name\" OWNER :\"owner\";"


class PsqlClient:
    """Builds and runs ``sudo -u postgres psql`` invocations.

    Statements are written to psql on stdin and values are passed with ``-v``,
    so psql quotes them (``:'var'`` as a literal, ``:"var"`` as an identifier)
    instead of the statement being assembled by string interpolation. psql does
    not expand variables in ``-c`` commands, which is why stdin is used.
    """

    def __init__(self, command_runner, system_account: str = SUPERUSER_ACCOUNT):
        self.command_runner = command_runner
        self.system_account = system_account

    @staticmethod
    def _check_variable(name: str, value: str):
        # psql -v splits on the first "=" and cannot carry a newline
        if "\n" in value or "\r" in value or "\x00" in value:
            raise ConfigurationError(
                message=f"Configuration value '{name}' must not contain line breaks.",
            )

    def build_command(self, variables: Dict[str, str], tuples_only: bool = False) -> List[str]:
        cmd = ["sudo", "-u", self.system_account, CLIENT_BINARY, "-X", "-q", "-v", "ON_ERROR_STOP=1"]
        if tuples_only:
            cmd.append("-tA")
        for name, value in variables.items():
            self._check_variable(name, value)
            cmd.extend(["-v", f"{name}={value}"])
        return cmd

    def query(self, statement: str, **variables: str) -> CommandResult:
        """Run a read-only statement and capture its unaligned tuple output."""
        cmd = self.build_command(variables, tuples_only=True)
        return self.command_runner.run_capture(cmd, input_text=statement)

    def execute(self, statement: str, **variables: str) -> Tuple[str, ...]:
        """Run a mutating statement with inherited output; raises on failure."""
        cmd = self.build_command(variables)
        self.command_runner.run(cmd, input_text=statement)
        return tuple(cmd)

    def role_exists_query(self, username: str) -> CommandResult:
        return self.query(ROLE_EXISTS_SQL, name=username)

    def database_exists_query(self, name: str) -> CommandResult:
        return self.query(DATABASE_EXISTS_SQL, name=name)

    def create_role(self, username: str, password: str) -> Tuple[str, ...]:
        return self.execute(CREATE_ROLE_SQL, username=username, password=password)

    def create_database(self, name: str, owner: str) -> Tuple[str, ...]:
        return self.execute(CREATE_DATABASE_SQL, name=name, owner=owner)

