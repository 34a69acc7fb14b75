"""Target classification: address literal vs. host name."""

import ipaddress

from core.models import TargetKind


def classify_target(host: str) -> TargetKind:
    """Return ADDRESS if host is an IPv4/IPv6 literal, NAME otherwise.

    WinRM refuses literal addresses unless they are in TrustedHosts, so
    address targets are routed to the direct WMI session instead.
    """
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return TargetKind.NAME
    return TargetKind.ADDRESS
