"""Data models for ntds-monitor."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


# Estimated share of the database file that is reclaimable whitespace. This is
# a policy default, not a value read from the database engine.
WHITESPACE_PERCENTAGE = 20.0


class TargetKind(Enum):
    ADDRESS = "ADDRESS"
    NAME = "NAME"


class ConnectionMode(Enum):
    DIRECT_MANAGEMENT = "DirectManagement"
    REMOTE_EXECUTION = "RemoteExecution"


def mask_password(password: str) -> str:
    """Mask a password for display (e.g. 'EricLikesRunning800' -> 'Er***00')."""
    if not password:
        return ""
    if len(password) <= 4:
        return password[0] + "***"
    return password[:2] + "***" + password[-2:]


@dataclass(frozen=True)
class Target:
    host: str
    kind: TargetKind

    def __str__(self) -> str:
        return self.host

    @property
    def is_address(self) -> bool:
        return self.kind is TargetKind.ADDRESS


@dataclass(frozen=True)
class Credential:
    username: str  # always realm-qualified (DOMAIN\user or user@realm)
    password: str = field(repr=False)

    def __str__(self) -> str:
        return f"{self.username}:{mask_password(self.password)}"

    @property
    def domain(self) -> str:
        if "\\" in self.username:
            return self.username.split("\\", 1)[0]
        if "@" in self.username:
            return self.username.split("@", 1)[1]
        return ""

    @property
    def account(self) -> str:
        """Username without its realm segment."""
        if "\\" in self.username:
            return self.username.split("\\", 1)[1]
        if "@" in self.username:
            return self.username.split("@", 1)[0]
        return self.username


@dataclass(frozen=True)
class ProbeSettings:
    timeout: int = 30
    winrm_port: int = 5985
    whitespace_percentage: float = WHITESPACE_PERCENTAGE
    debug: bool = False


@dataclass(frozen=True)
class CollectedMetrics:
    database_size_mb: float
    whitespace_mb: float
    whitespace_percentage: float
    drive_free_mb: float
    drive_used_percentage: float
    database_path: str


@dataclass(frozen=True)
class ProbeSuccess:
    metrics: CollectedMetrics
    code: int = 0


@dataclass(frozen=True)
class ProbeFailure:
    code: int
    message: str


Report = Union[ProbeSuccess, ProbeFailure]
