"""Single-shot probe run: connect, collect, classify failures, always release."""

from typing import Callable, Optional

from core.errors import classify_error
from core.models import Credential, ProbeFailure, ProbeSettings, ProbeSuccess, Report, Target, TargetKind, mask_password
from core.output import console, print_channels_table, print_debug
from connectors import get_connector
from connectors.base import Connector, Session


def release_session(session: Optional[Session], debug: bool = False) -> None:
    """Close the session if one was opened. Never raises."""
    if session is None:
        if debug:
            print_debug("session", state="never opened")
        return
    try:
        session.close()
    except Exception as e:
        # The report is already decided; a failed release must not replace it.
        console.print(f"  [warn]Failed to release {session.mode.value} session to {session.target}: {e}[/warn]")
        return
    if debug:
        print_debug("session", state="closed", mode=session.mode.value)


# Shorter secrets would mangle ordinary words in the message.
MIN_REDACT_LENGTH = 4


def redact(message: str, credential: Credential) -> str:
    password = credential.password
    if len(password) >= MIN_REDACT_LENGTH and password in message:
        return message.replace(password, mask_password(password))
    return message


def run_probe(
    target: Target,
    credential: Credential,
    settings: Optional[ProbeSettings] = None,
    connector_factory: Optional[Callable[[TargetKind], Connector]] = None,
    finalizer: Callable[..., None] = release_session,
) -> Report:
    """Run one collection pass against target and return exactly one Report."""
    settings = settings or ProbeSettings()
    session: Optional[Session] = None

    if settings.debug:
        print_debug("classify", target=target.host, kind=target.kind.value)

    try:
        connector = (connector_factory or get_connector)(target.kind)
        if settings.debug:
            print_debug(
                "connect", connector=connector.name, mode=connector.mode.value,
                user=credential.username, timeout=settings.timeout,
            )
        session = connector.open(target, credential, settings)
        report: Report = ProbeSuccess(session.collect(settings))
    except Exception as e:
        # Classify the untouched transport text; redaction only applies to what is reported.
        classified = classify_error(str(e) or type(e).__name__)
        if settings.debug:
            print_debug("failure", error_type=type(e).__name__, message=redact(str(e), credential))
        report = ProbeFailure(code=classified.code, message=redact(classified.message, credential))
    finally:
        finalizer(session, debug=settings.debug)

    if settings.debug and isinstance(report, ProbeSuccess):
        print_channels_table(report.metrics)

    return report
