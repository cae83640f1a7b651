"""Shared constants for pgprovisioner."""

POSTGRES_HOST = "localhost"
POSTGRES_PORT = 5432
JDBC_SCHEME = "jdbc:postgresql"

CLIENT_BINARY = "psql"
DEFAULT_PACKAGE_NAME = "postgresql"
SUPERUSER_ACCOUNT = "postgres"

DEFAULT_CONFIG_FILE = ".pgprovisioner.yml"
DEFAULT_ENV_FILE = ".env"

ENV_USER = "POSTGRES_USER"
ENV_PASSWORD = "POSTGRES_PASSWORD"
ENV_MAIN_DB = "MAIN_DB_NAME"
ENV_BILLING_DB = "BILLING_DB_NAME"

EXIT_OK = 0
EXIT_UNEXPECTED = 1
EXIT_CONFIGURATION_ERROR = 2
EXIT_EXECUTION_ERROR = 3
