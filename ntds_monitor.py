#!/usr/bin/env python3
"""ntds-monitor - Active Directory database size probe for PRTG.

Queries one domain controller for its NTDS database size, estimated
whitespace and hosting-drive capacity, and prints a PRTG JSON report.
"""

import sys
from pathlib import Path

# Allow running directly with `python ntds_monitor.py` without installing
if __name__ == "__main__":
    sys.path.insert(0, str(Path(__file__).parent))

import click

from core.engine import run_probe
from core.input_parser import parse_credential, parse_target
from core.models import WHITESPACE_PERCENTAGE, ProbeSettings, ProbeSuccess
from core.output import emit_report, print_debug, print_summary


@click.command()
@click.option("-c", "--computer-name", required=True, help="Domain controller host name or IP address")
@click.option("-u", "--username", required=True, help="Account name (DOMAIN\\user; WORKGROUP\\ is prefixed if no domain)")
@click.option("-p", "--password", required=True, help="Account password")
@click.option("--timeout", default=30, show_default=True, type=click.IntRange(min=1), help="Remote operation timeout (seconds, WinRM)")
@click.option("--winrm-port", default=5985, show_default=True, type=click.IntRange(1, 65535), help="WinRM port (5986 uses HTTPS)")
@click.option(
    "--whitespace-percent",
    default=WHITESPACE_PERCENTAGE,
    show_default=True,
    type=click.FloatRange(0, 100),
    help="Estimated whitespace share of the database file",
)
@click.option("--debug", is_flag=True, help="Print diagnostics to stderr")
@click.option("-o", "--output", "output_file", help="Also write the report JSON to a file")
def main(
    computer_name,
    username,
    password,
    timeout,
    winrm_port,
    whitespace_percent,
    debug,
    output_file,
):
    """Report NTDS database size, whitespace and drive usage for one domain controller.

    Host names are queried through WinRM; IP addresses through WMI/DCOM.
    """
    target = parse_target(computer_name)
    credential = parse_credential(username, password)
    settings = ProbeSettings(
        timeout=timeout,
        winrm_port=winrm_port,
        whitespace_percentage=whitespace_percent,
        debug=debug,
    )

    report = run_probe(target, credential, settings)

    if debug:
        print_summary(report)
        print_debug("exit", code=report.code)

    emit_report(report, output_file=output_file)
    if not isinstance(report, ProbeSuccess):
        sys.exit(report.code)


if __name__ == "__main__":
    main()
