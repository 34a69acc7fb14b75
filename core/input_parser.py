"""Input parsing for the target and credentials."""

from core.classifier import classify_target
from core.models import Credential, Target

DEFAULT_REALM = "WORKGROUP"


def qualify_username(username: str, realm: str = DEFAULT_REALM) -> str:
    """Prefix the realm unless the username already carries one (DOMAIN\\user or user@realm)."""
    if "\\" in username or "@" in username:
        return username
    return f"{realm}\\{username}"


def parse_target(target_str: str) -> Target:
    """Build a Target, classifying it once for the whole run."""
    host = target_str.strip()
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return Target(host=host, kind=classify_target(host))


def parse_credential(username: str, password: str) -> Credential:
    return Credential(username=qualify_username(username.strip()), password=password)
