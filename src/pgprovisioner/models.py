"""Shared domain models for pgprovisioner."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .constants import POSTGRES_HOST, POSTGRES_PORT


@dataclass(frozen=True)
class Credential:
    """Login role credentials, held in memory for a single run."""

    username: str
    password: str


@dataclass(frozen=True)
class DatabaseSpec:
    name: str
    owner: str


@dataclass(frozen=True)
class CommandResult:
    """Exit status and captured text of one external process."""

    command: Tuple[str, ...]
    exit_code: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ProbeResult(Enum):
    """Outcome of an existence check. UNKNOWN is handled as ABSENT."""

    EXISTS = "exists"
    ABSENT = "absent"
    UNKNOWN = "unknown"

    @property
    def exists(self) -> bool:
        return self is ProbeResult.EXISTS


class Stage(Enum):
    START = "start"
    INSTALL_CHECKED = "install_checked"
    ROLE_CHECKED = "role_checked"
    DB1_CHECKED = "db1_checked"
    DB2_CHECKED = "db2_checked"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class StageRecord:
    """Precondition and effect of a single stage transition."""

    stage: Stage
    resource: str
    probe: Optional[ProbeResult]
    action: str
    commands: Tuple[Tuple[str, ...], ...] = ()


@dataclass(frozen=True)
class ProvisioningConfig:
    """Explicit configuration passed into the provisioner."""

    username: Optional[str]
    password: Optional[str]
    main_db: Optional[str]
    billing_db: Optional[str]
    host: str = POSTGRES_HOST
    port: int = POSTGRES_PORT

    REQUIRED_FIELDS = ("username", "password", "main_db", "billing_db")

    def missing_fields(self) -> List[str]:
        missing = []
        for name in self.REQUIRED_FIELDS:
            value = getattr(self, name)
            if value is None or not str(value).strip():
                missing.append(name)
        return missing

    @property
    def credential(self) -> Credential:
        return Credential(username=self.username or "", password=self.password or "")

    @property
    def databases(self) -> Tuple[DatabaseSpec, DatabaseSpec]:
        owner = self.username or ""
        return (
            DatabaseSpec(name=self.main_db or "", owner=owner),
            DatabaseSpec(name=self.billing_db or "", owner=owner),
        )


@dataclass(frozen=True)
class ProvisioningOutcome:
    """Final report, built only after every stage succeeded."""

    credential: Credential
    databases: Tuple[DatabaseSpec, DatabaseSpec]
    connection_urls: Tuple[str, str]
    stages: Tuple[StageRecord, ...] = field(default_factory=tuple)

    @property
    def mutating_commands(self) -> List[Tuple[str, ...]]:
        return [command for record in self.stages for command in record.commands]
