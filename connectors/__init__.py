"""Connector registry: one connector per target kind."""

import importlib
from typing import Dict, Tuple, Type

from core.models import TargetKind

from .base import Connector

# kind -> (module, class, pip package). Imported lazily so a run only needs
# the transport library it actually uses.
_CONNECTOR_MAP: Dict[TargetKind, Tuple[str, str, str]] = {
    TargetKind.ADDRESS: ("wmi", "WMIConnector", "impacket"),
    TargetKind.NAME: ("winrm_mod", "WinRMConnector", "pywinrm"),
}


class ConnectorRegistry:
    """Resolves a target kind to its connector class."""

    _cache: Dict[TargetKind, Type[Connector]] = {}

    @classmethod
    def get_for_kind(cls, kind: TargetKind) -> Type[Connector]:
        if kind in cls._cache:
            return cls._cache[kind]

        modname, clsname, pkg = _CONNECTOR_MAP[kind]
        try:
            module = importlib.import_module(f".{modname}", package=__name__)
        except ImportError as e:
            raise RuntimeError(
                f"{clsname} requires {pkg} ({e}). Install with: pip install {pkg}"
            )
        connector_cls = getattr(module, clsname)
        cls._cache[kind] = connector_cls
        return connector_cls


def get_connector(kind: TargetKind) -> Connector:
    return ConnectorRegistry.get_for_kind(kind)()
