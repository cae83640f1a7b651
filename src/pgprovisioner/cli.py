import logging
import os

import click
from rich.logging import RichHandler

from .constants import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_ENV_FILE,
    DEFAULT_PACKAGE_NAME,
    EXIT_CONFIGURATION_ERROR,
)
from .core import PostgresProvisioner
from .errors import ConfigurationError
from .models import ProvisioningConfig
from .services.config_loader import ConfigLoader


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command()
@click.option("--user", required=False, help="Login role to ensure (env: POSTGRES_USER).")
@click.option("--password", required=False, help="Password for a newly created role (env: POSTGRES_PASSWORD).")
@click.option("--main-db", required=False, help="Main database name (env: MAIN_DB_NAME).")
@click.option("--billing-db", required=False, help="Billing database name (env: BILLING_DB_NAME).")
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_FILE} if present.",
)
@click.option(
    "--env-file",
    required=False,
    type=click.Path(),
    help=f"Path to a .env file with PostgreSQL credentials (default: {DEFAULT_ENV_FILE}).",
)
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.option(
    "--command-timeout",
    required=False,
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Abort any external command running longer than this many seconds (default: no timeout).",
)
@click.option(
    "--package-name",
    required=False,
    default=None,
    help=f"apt package providing PostgreSQL (default: {DEFAULT_PACKAGE_NAME}).",
)
def main(
    user,
    password,
    main_db,
    billing_db,
    config,
    env_file,
    verbose,
    log_file,
    command_timeout,
    package_name,
):
    """Install PostgreSQL and ensure a login role and two databases exist."""
    logger = logging.getLogger("pgprovisioner")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
        env_file = _resolve_option(env_file, config_values, "env_file", default=DEFAULT_ENV_FILE)
        env_values = config_loader.load_env(env_file)
    except ConfigurationError as exc:
        error = click.ClickException(str(exc))
        error.exit_code = EXIT_CONFIGURATION_ERROR
        raise error from exc

    user = _resolve_option(user, config_values, "user", default=env_values.get("user"))
    password = _resolve_option(password, config_values, "password", default=env_values.get("password"))
    main_db = _resolve_option(main_db, config_values, "main_db", default=env_values.get("main_db"))
    billing_db = _resolve_option(
        billing_db,
        config_values,
        "billing_db",
        default=env_values.get("billing_db"),
    )
    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")
    command_timeout = _resolve_option(command_timeout, config_values, "command_timeout")
    if command_timeout is not None:
        command_timeout = float(command_timeout)
    package_name = str(
        _resolve_option(package_name, config_values, "package_name", default=DEFAULT_PACKAGE_NAME)
    )

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    provisioning_config = ProvisioningConfig(
        username=None if user is None else str(user),
        password=None if password is None else str(password),
        main_db=None if main_db is None else str(main_db),
        billing_db=None if billing_db is None else str(billing_db),
    )
    provisioner = PostgresProvisioner(
        config=provisioning_config,
        command_timeout=command_timeout,
        package_name=package_name,
    )

    raise SystemExit(provisioner.run())


if __name__ == "__main__":
    main()
