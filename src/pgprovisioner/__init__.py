"""
pgprovisioner - Idempotent local PostgreSQL provisioning
"""

__version__ = "0.1.0"

from .core import PostgresProvisioner, format_connection_report
from .errors import ConfigurationError, ExecutionError, ProcessSpawnError, ProvisionerError
from .models import ProvisioningConfig, ProvisioningOutcome

__all__ = [
    "ConfigurationError",
    "ExecutionError",
    "PostgresProvisioner",
    "ProcessSpawnError",
    "ProvisionerError",
    "ProvisioningConfig",
    "ProvisioningOutcome",
    "format_connection_report",
]
