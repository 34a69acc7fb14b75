"""Direct-management connector: WMI over DCOM using impacket."""

from typing import Any, Dict, List, Optional, Tuple

from impacket.dcerpc.v5.dcom import wmi
from impacket.dcerpc.v5.dcomrt import DCOMConnection
from impacket.dcerpc.v5.dtypes import NULL

from connectors.base import Connector, Session
from core.collector import DSA_DATABASE_VALUE, NTDS_PARAMETERS_KEY, collect_metrics
from core.errors import RegistryReadError
from core.models import CollectedMetrics, ConnectionMode, Credential, ProbeSettings, Target

HKEY_LOCAL_MACHINE = 0x80000002
ERROR_FILE_NOT_FOUND = 2
ERROR_ACCESS_DENIED = 5
WMI_NAMESPACE = "//./root/cimv2"


def wql_quote(value: str) -> str:
    """Quote a string literal for a WQL WHERE clause."""
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


class WMISession(Session):
    mode = ConnectionMode.DIRECT_MANAGEMENT

    def __init__(self, target: Target, dcom: DCOMConnection, services: Any):
        super().__init__(target)
        self._dcom = dcom
        self._services = services

    def query(self, wql: str) -> List[Dict[str, Any]]:
        """Run a WQL query and return each row as a {property: value} dict."""
        enum = self._services.ExecQuery(wql)
        rows = []
        try:
            while True:
                try:
                    obj = enum.Next(0xFFFFFFFF, 1)[0]
                except Exception as e:
                    # WBEM_S_FALSE marks the end of the enumeration
                    if "S_FALSE" in str(e):
                        break
                    raise
                props = obj.getProperties()
                rows.append({name: prop["value"] for name, prop in props.items()})
        finally:
            enum.RemRelease()
        return rows

    def read_database_path(self) -> Optional[str]:
        std_reg_prov, _ = self._services.GetObject("StdRegProv")
        try:
            out = std_reg_prov.GetStringValue(HKEY_LOCAL_MACHINE, NTDS_PARAMETERS_KEY, DSA_DATABASE_VALUE)
        finally:
            std_reg_prov.RemRelease()
        status = out.ReturnValue
        if status == ERROR_FILE_NOT_FOUND:
            return None
        location = f"HKLM\\{NTDS_PARAMETERS_KEY} value '{DSA_DATABASE_VALUE}'"
        if status == ERROR_ACCESS_DENIED:
            raise RegistryReadError(f"Access is denied reading {location} (Win32 error {status})")
        if status != 0:
            raise RegistryReadError(f"Reading {location} failed with Win32 error {status}")
        return out.sValue or None

    def get_file_size(self, path: str) -> Optional[int]:
        rows = self.query(f"SELECT FileSize FROM CIM_DataFile WHERE Name = {wql_quote(path)}")
        if not rows or rows[0].get("FileSize") is None:
            return None
        return int(rows[0]["FileSize"])

    def get_drive_space(self, drive: str) -> Optional[Tuple[int, int]]:
        rows = self.query(f"SELECT Size, FreeSpace FROM Win32_LogicalDisk WHERE DeviceID = {wql_quote(drive)}")
        if not rows:
            return None
        size = rows[0].get("Size")
        free = rows[0].get("FreeSpace")
        if size is None or free is None:
            return None
        return int(size), int(free)

    def collect(self, settings: ProbeSettings) -> CollectedMetrics:
        return collect_metrics(self, settings.whitespace_percentage)

    def _release(self) -> None:
        try:
            self._services.RemRelease()
        finally:
            self._dcom.disconnect()


class WMIConnector(Connector):
    name = "wmi"
    mode = ConnectionMode.DIRECT_MANAGEMENT
    default_port = 135

    def open(self, target: Target, credential: Credential, settings: ProbeSettings) -> WMISession:
        dcom = DCOMConnection(
            target.host,
            credential.account,
            credential.password,
            credential.domain,
            oxidResolver=True,
        )
        try:
            iface = dcom.CoCreateInstanceEx(wmi.CLSID_WbemLevel1Login, wmi.IID_IWbemLevel1Login)
            login = wmi.IWbemLevel1Login(iface)
            services = login.NTLMLogin(WMI_NAMESPACE, NULL, NULL)
            login.RemRelease()
        except Exception:
            dcom.disconnect()
            raise
        return WMISession(target, dcom, services)
