"""NTDS database metric collection and derivation."""

import math
from typing import Any, Dict, Optional, Protocol, Tuple

from core.errors import DatabasePathNotFound, DriveInfoUnavailable, InvalidPayloadError
from core.models import WHITESPACE_PERCENTAGE, CollectedMetrics

NTDS_PARAMETERS_KEY = r"SYSTEM\CurrentControlSet\Services\NTDS\Parameters"
DSA_DATABASE_VALUE = "DSA Database file"

BYTES_PER_MB = 1024 * 1024


class ManagementSource(Protocol):
    """The three remote lookups a direct-management session must provide."""

    def read_database_path(self) -> Optional[str]: ...

    def get_file_size(self, path: str) -> Optional[int]: ...

    def get_drive_space(self, drive: str) -> Optional[Tuple[int, int]]: ...


def drive_for_path(path: str) -> str:
    """'C:\\Windows\\NTDS\\ntds.dit' -> 'C:'"""
    return path[0].upper() + ":"


def compute_metrics(
    database_path: str,
    file_size_bytes: int,
    drive_total_bytes: int,
    drive_free_bytes: int,
    whitespace_percentage: float = WHITESPACE_PERCENTAGE,
) -> CollectedMetrics:
    if not drive_total_bytes:
        raise DriveInfoUnavailable(
            f"Drive {drive_for_path(database_path)} reported a total size of 0 bytes"
        )

    db_size_mb = round(file_size_bytes / BYTES_PER_MB, 2)
    return CollectedMetrics(
        database_size_mb=db_size_mb,
        whitespace_mb=round(db_size_mb * whitespace_percentage / 100, 2),
        whitespace_percentage=whitespace_percentage,
        drive_free_mb=round(drive_free_bytes / BYTES_PER_MB, 2),
        drive_used_percentage=round(
            (drive_total_bytes - drive_free_bytes) / drive_total_bytes * 100, 2
        ),
        database_path=database_path,
    )


def collect_metrics(
    source: ManagementSource,
    whitespace_percentage: float = WHITESPACE_PERCENTAGE,
) -> CollectedMetrics:
    """Path -> file size -> drive space, in that order; each step depends on the path."""
    path = source.read_database_path()
    if not path:
        raise DatabasePathNotFound(
            f"Cannot find path 'HKLM\\{NTDS_PARAMETERS_KEY}' value '{DSA_DATABASE_VALUE}'"
        )

    size = source.get_file_size(path)
    if size is None:
        raise DatabasePathNotFound(f"Cannot find path '{path}' because it does not exist")

    drive = drive_for_path(path)
    space = source.get_drive_space(drive)
    if space is None:
        raise DriveInfoUnavailable(f"No logical disk information returned for drive {drive}")
    total, free = space

    return compute_metrics(path, size, total, free, whitespace_percentage)


# Keys in the JSON bundle returned by the remote PowerShell procedure.
PAYLOAD_FIELDS = {
    "database_size_mb": "DatabaseSizeMB",
    "whitespace_mb": "WhitespaceMB",
    "whitespace_percentage": "WhitespacePercentage",
    "drive_free_mb": "DriveFreeMB",
    "drive_used_percentage": "DriveUsedPercentage",
}


def metrics_from_payload(payload: Dict[str, Any]) -> CollectedMetrics:
    """Validate the remotely computed bundle and turn it into CollectedMetrics."""
    if not isinstance(payload, dict):
        raise InvalidPayloadError(f"Expected a JSON object from the remote procedure, got {type(payload).__name__}")

    values = {}
    for attr, key in PAYLOAD_FIELDS.items():
        raw = payload.get(key)
        if raw is None or isinstance(raw, bool):
            raise InvalidPayloadError(f"Remote result is missing '{key}'")
        try:
            value = float(raw)
        except (TypeError, ValueError):
            raise InvalidPayloadError(f"Remote result has a non-numeric '{key}': {raw!r}")
        if not math.isfinite(value):
            raise InvalidPayloadError(f"Remote result has a non-finite '{key}': {raw!r}")
        values[attr] = value

    return CollectedMetrics(database_path=str(payload.get("DatabasePath") or ""), **values)
