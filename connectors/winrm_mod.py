"""Remote-execution connector: PowerShell over WinRM using pywinrm."""

import json

import winrm

from connectors.base import Connector, Session
from core.collector import DSA_DATABASE_VALUE, NTDS_PARAMETERS_KEY, metrics_from_payload
from core.errors import InvalidPayloadError, RemoteCommandError
from core.models import CollectedMetrics, ConnectionMode, Credential, ProbeSettings, Target

# Runs entirely on the target and returns the computed bundle, so the whole
# collection costs one round trip. Error texts match the WMI path's.
COLLECT_SCRIPT = r"""
$ErrorActionPreference = 'Stop'
$props = Get-ItemProperty -Path $NtdsKey
$path = $props.$ValueName
if ([string]::IsNullOrEmpty($path)) {
    throw "Cannot find path '$NtdsKey' value '$ValueName'"
}
$file = Get-Item -LiteralPath $path -Force
$drive = $path.Substring(0, 1).ToUpper() + ':'
$disk = Get-CimInstance -ClassName Win32_LogicalDisk -Filter "DeviceID='$drive'"
if (-not $disk -or $null -eq $disk.Size) {
    throw "No logical disk information returned for drive $drive"
}
if ($disk.Size -eq 0) {
    throw "Drive $drive reported a total size of 0 bytes"
}
$dbSizeMB = [math]::Round($file.Length / 1MB, 2)
[PSCustomObject]@{
    DatabasePath         = $path
    DatabaseSizeMB       = $dbSizeMB
    WhitespaceMB         = [math]::Round($dbSizeMB * $WhitespacePercentage / 100, 2)
    WhitespacePercentage = $WhitespacePercentage
    DriveFreeMB          = [math]::Round($disk.FreeSpace / 1MB, 2)
    DriveUsedPercentage  = [math]::Round(($disk.Size - $disk.FreeSpace) / $disk.Size * 100, 2)
} | ConvertTo-Json -Compress
"""


def build_collect_script(whitespace_percentage: float) -> str:
    header = (
        f"$NtdsKey = 'HKLM:\\{NTDS_PARAMETERS_KEY}'\n"
        f"$ValueName = '{DSA_DATABASE_VALUE}'\n"
        f"$WhitespacePercentage = {float(whitespace_percentage)!r}\n"
    )
    return header + COLLECT_SCRIPT


class WinRMSession(Session):
    mode = ConnectionMode.REMOTE_EXECUTION

    def __init__(self, target: Target, session: winrm.Session):
        super().__init__(target)
        self._session = session

    def collect(self, settings: ProbeSettings) -> CollectedMetrics:
        result = self._session.run_ps(build_collect_script(settings.whitespace_percentage))
        stdout = result.std_out.decode("utf-8", errors="ignore").strip()
        if result.status_code != 0:
            stderr = result.std_err.decode("utf-8", errors="ignore").strip()
            raise RemoteCommandError(stderr or stdout or f"Remote script exited with status {result.status_code}")

        try:
            payload = json.loads(stdout)
        except ValueError:
            raise InvalidPayloadError(f"Remote script returned non-JSON output: {stdout[:200]!r}")
        return metrics_from_payload(payload)

    def _release(self) -> None:
        self._session.protocol.transport.close_session()


class WinRMConnector(Connector):
    name = "winrm"
    mode = ConnectionMode.REMOTE_EXECUTION
    default_port = 5985

    def open(self, target: Target, credential: Credential, settings: ProbeSettings) -> WinRMSession:
        port = settings.winrm_port or self.default_port
        scheme = "https" if port == 5986 else "http"
        endpoint = f"{scheme}://{target.host}:{port}/wsman"

        session = winrm.Session(
            endpoint,
            auth=(credential.username, credential.password),
            transport="ntlm",
            server_cert_validation="ignore",
            operation_timeout_sec=settings.timeout,
            read_timeout_sec=settings.timeout + 5,
        )
        return WinRMSession(target, session)
