import logging
from typing import Callable, List, Optional, Tuple

from rich.console import Console

from .constants import (
    DEFAULT_PACKAGE_NAME,
    EXIT_CONFIGURATION_ERROR,
    EXIT_EXECUTION_ERROR,
    EXIT_OK,
    EXIT_UNEXPECTED,
    JDBC_SCHEME,
)
from .errors import (
    CommandTimeoutError,
    ConfigurationError,
    ExecutionError,
    ProcessSpawnError,
    ProvisionerError,
)
from .errors_catalog import actionable_error
from .models import (
    DatabaseSpec,
    ProbeResult,
    ProvisioningConfig,
    ProvisioningOutcome,
    Stage,
    StageRecord,
)
from .services.command_runner import CommandRunner
from .services.installer import PackageInstaller
from .services.probes import ExistenceProbes
from .services.sql_client import PsqlClient

console = Console()
logger = logging.getLogger("pgprovisioner")

Commands = Tuple[Tuple[str, ...], ...]


def connection_url(host: str, port: int, db_name: str) -> str:
    return f"{JDBC_SCHEME}://{host}:{port}/{db_name}"


def format_connection_report(outcome: ProvisioningOutcome) -> str:
    main_db, billing_db = outcome.databases
    main_url, billing_url = outcome.connection_urls
    return (
        "PostgreSQL connection info:\n"
        f"  User: {outcome.credential.username}\n"
        f"  Password: {outcome.credential.password}\n"
        f"  Main database: {main_db.name}\n"
        f"    URL: {main_url}\n"
        f"  Billing database: {billing_db.name}\n"
        f"    URL: {billing_url}"
    )


class PostgresProvisioner:
    """Installs PostgreSQL and ensures one login role and two databases exist.

    Stages run strictly in order and each is gated by its probe:
    START -> INSTALL_CHECKED -> ROLE_CHECKED -> DB1_CHECKED -> DB2_CHECKED -> DONE.
    The first failing mutation moves the run to FAILED; completed stages are not
    rolled back.
    """

    def __init__(
        self,
        config: ProvisioningConfig,
        command_timeout: Optional[float] = None,
        package_name: str = DEFAULT_PACKAGE_NAME,
        command_runner: Optional[CommandRunner] = None,
    ):
        self.config = config
        self.command_runner = command_runner or CommandRunner(
            logger=logger,
            default_timeout=command_timeout,
            secrets=[config.password] if config.password else None,
        )
        self.sql_client = PsqlClient(self.command_runner)
        self.probes = ExistenceProbes(
            command_runner=self.command_runner,
            sql_client=self.sql_client,
            logger=logger,
        )
        self.installer = PackageInstaller(
            command_runner=self.command_runner,
            logger=logger,
            console=console,
            package_name=package_name,
        )

        self.stage = Stage.START
        self.records: List[StageRecord] = []

    def _transition(
        self,
        next_stage: Stage,
        resource: str,
        probe: Optional[ProbeResult],
        action: Callable[[], Commands],
        skip_message: str,
    ):
        if probe is not None and probe.exists:
            console.print(f"[dim]{skip_message}[/dim]")
            logger.info(skip_message)
            self.records.append(StageRecord(next_stage, resource, probe, "skipped"))
            self.stage = next_stage
            return

        try:
            commands = action()
        except Exception:
            self.records.append(StageRecord(next_stage, resource, probe, "failed"))
            self.stage = Stage.FAILED
            raise

        self.records.append(StageRecord(next_stage, resource, probe, "applied", commands))
        self.stage = next_stage

    def validate_config(self):
        missing = self.config.missing_fields()
        if missing:
            raise ConfigurationError(missing)

        for name in ProvisioningConfig.REQUIRED_FIELDS:
            value = getattr(self.config, name)
            if any(char in value for char in "\r\n\x00"):
                raise ConfigurationError(
                    message=f"Configuration value '{name}' must not contain line breaks."
                )

    def ensure_engine(self):
        probe = self.probes.engine_installed()
        self._transition(
            Stage.INSTALL_CHECKED,
            self.installer.package_name,
            probe,
            self.installer.install,
            "PostgreSQL is already installed. Skipping installation.",
        )

    def ensure_role(self):
        username = self.config.username
        probe = self.probes.role_exists(username)

        def create() -> Commands:
            console.print(f"[blue]Creating PostgreSQL role '{username}'...[/blue]")
            logger.info("Creating PostgreSQL role '%s'...", username)
            return (self.sql_client.create_role(username, self.config.password),)

        self._transition(
            Stage.ROLE_CHECKED,
            username,
            probe,
            create,
            f"PostgreSQL role '{username}' already exists. Skipping creation.",
        )

    def ensure_database(self, next_stage: Stage, database: DatabaseSpec):
        probe = self.probes.database_exists(database.name)

        def create() -> Commands:
            console.print(f"[blue]Creating database '{database.name}'...[/blue]")
            logger.info("Creating database '%s' owned by '%s'...", database.name, database.owner)
            return (self.sql_client.create_database(database.name, database.owner),)

        self._transition(
            next_stage,
            database.name,
            probe,
            create,
            f"Database '{database.name}' already exists. Skipping creation.",
        )

    def connection_url(self, db_name: str) -> str:
        return connection_url(self.config.host, self.config.port, db_name)

    def provision(self) -> ProvisioningOutcome:
        """Run every stage and return the outcome, raising on the first failure."""
        self.stage = Stage.START
        self.records = []

        try:
            self.validate_config()
        except ConfigurationError:
            self.stage = Stage.FAILED
            raise

        main_db, billing_db = self.config.databases

        self.ensure_engine()

        console.print("[blue]Configuring PostgreSQL:[/blue]")
        logger.info("  User: %s", self.config.username)
        logger.info("  Main database: %s", main_db.name)
        logger.info("  Billing database: %s", billing_db.name)

        self.ensure_role()
        self.ensure_database(Stage.DB1_CHECKED, main_db)
        self.ensure_database(Stage.DB2_CHECKED, billing_db)

        self.stage = Stage.DONE
        return ProvisioningOutcome(
            credential=self.config.credential,
            databases=(main_db, billing_db),
            connection_urls=(
                self.connection_url(main_db.name),
                self.connection_url(billing_db.name),
            ),
            stages=tuple(self.records),
        )

    def run(self) -> int:
        logger.info("Starting PostgreSQL installation and configuration...")
        try:
            outcome = self.provision()
            console.print("[green]PostgreSQL configuration completed successfully.[/green]")
            logger.info("\n%s", format_connection_report(outcome))
            return EXIT_OK

        except ConfigurationError as exc:
            message = str(exc)
            if exc.missing_fields:
                message = actionable_error("missing_configuration", fields=", ".join(exc.missing_fields))
            console.print(f"[bold red]Configuration error:[/bold red] {message}")
            logger.error(str(exc))
            return EXIT_CONFIGURATION_ERROR
        except CommandTimeoutError as exc:
            console.print(
                f"[bold red]Error:[/bold red] {actionable_error('command_timed_out', error=str(exc))}"
            )
            logger.error(str(exc))
            return EXIT_EXECUTION_ERROR
        except ExecutionError as exc:
            console.print(f"[bold red]Error:[/bold red] {actionable_error('command_failed', error=str(exc))}")
            logger.error(str(exc))
            return EXIT_EXECUTION_ERROR
        except ProcessSpawnError as exc:
            console.print(
                f"[bold red]Error:[/bold red] {actionable_error('command_not_started', error=str(exc))}"
            )
            logger.error(str(exc))
            return EXIT_EXECUTION_ERROR
        except ProvisionerError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            return EXIT_UNEXPECTED
        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            return EXIT_UNEXPECTED
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            logger.exception("Unexpected error")
            return EXIT_UNEXPECTED
        finally:
            logger.info("PostgreSQL installation and configuration finished (stage: %s).", self.stage.value)
