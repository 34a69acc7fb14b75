"""Probe exceptions and error-message classification.

The transports (DCOM/WMI via impacket, WinRM via pywinrm/requests) expose no
structured error surface we can rely on, so failures are classified by
matching substrings of their message text. That text is not a stable contract
across Windows versions or locales; a localized message falls through to the
general category rather than being guessed at.
"""

from dataclasses import dataclass
from typing import List, Tuple


class ProbeError(Exception):
    """Base class for failures raised by the probe itself."""


class DatabasePathNotFound(ProbeError):
    """The NTDS database path could not be resolved on the target."""


class DriveInfoUnavailable(ProbeError):
    """The drive hosting the database reported no usable capacity."""


class RegistryReadError(ProbeError):
    """StdRegProv reported a failure other than a missing value."""


class RemoteCommandError(ProbeError):
    """The remote PowerShell procedure exited with a failure status."""


class InvalidPayloadError(ProbeError):
    """The remote procedure returned something other than the expected bundle."""


GENERAL_ERROR = 1


@dataclass(frozen=True)
class ErrorRule:
    code: int
    patterns: Tuple[str, ...]
    hint: str


# Order matters: the first matching rule wins.
ERROR_RULES: List[ErrorRule] = [
    ErrorRule(
        code=2,
        patterns=(
            "access is denied",
            "rpc_s_access_denied",
            "e_accessdenied",
            "status_logon_failure",
            "credentials were rejected",
        ),
        hint="Check credentials and that the account may query the domain controller",
    ),
    ErrorRule(
        code=3,
        patterns=("cannot find path", "path not found"),
        hint="Active Directory may not be installed, or the NTDS registry value is missing",
    ),
    ErrorRule(
        code=4,
        patterns=(
            "network path was not found",
            "unable to connect",
            "failed to establish a new connection",
            "name or service not known",
            "no route to host",
            "connection refused",
        ),
        hint="Check that the target is reachable and the name resolves",
    ),
    ErrorRule(
        code=5,
        patterns=("timeout expired", "timed out"),
        hint="The remote call did not complete in time; check target load and firewall",
    ),
    ErrorRule(
        code=6,
        patterns=("the rpc server is unavailable", "rpc_s_server_unavailable"),
        hint="Check that RPC/DCOM (TCP 135 and dynamic ports) is allowed to the target",
    ),
    ErrorRule(
        code=7,
        patterns=("cannotuseipaddress", "trustedhosts"),
        hint="Use the host name, or add the address to the WinRM TrustedHosts list",
    ),
]

GENERAL_HINT = "Run with --debug for details"


@dataclass(frozen=True)
class ErrorClassification:
    code: int
    message: str


def classify_error(message: str) -> ErrorClassification:
    """Map a failure message to (code, enriched message). Never raises."""
    original = (message or "").strip() or "Unknown error"
    lowered = original.lower()
    for rule in ERROR_RULES:
        if any(pattern in lowered for pattern in rule.patterns):
            return ErrorClassification(rule.code, f"{original} - {rule.hint}")
    return ErrorClassification(GENERAL_ERROR, f"{original} - {GENERAL_HINT}")
