"""Report formatting (PRTG JSON on stdout) and Rich diagnostics on stderr."""

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table

from core.models import CollectedMetrics, ProbeFailure, ProbeSuccess, Report
from core.theme import MOCHA, PROBE_THEME

# stdout belongs to the monitoring platform; everything human-facing goes to stderr.
console = Console(theme=PROBE_THEME, stderr=True)

ERROR_PREFIX = "Error monitoring AD database: "


@dataclass(frozen=True)
class Channel:
    name: str
    attr: str
    unit: str = "Custom"
    custom_unit: str = ""
    limits: Dict[str, float] = field(default_factory=dict)


# Warning/error limits are advisory defaults; the monitoring platform owns alerting.
CHANNELS: List[Channel] = [
    Channel(
        "AD Database Size (MB)", "database_size_mb", custom_unit="MB",
        limits={"limitmaxwarning": 15000, "limitmaxerror": 20000},
    ),
    Channel("AD Database Whitespace (MB)", "whitespace_mb", custom_unit="MB"),
    Channel(
        "AD Database Whitespace (%)", "whitespace_percentage", unit="Percent",
        limits={"limitmaxwarning": 30, "limitmaxerror": 40},
    ),
    Channel(
        "Database Drive Free Space (MB)", "drive_free_mb", custom_unit="MB",
        limits={"limitminwarning": 10000},
    ),
    Channel(
        "Database Drive Usage (%)", "drive_used_percentage", unit="Percent",
        limits={"limitmaxwarning": 85, "limitmaxerror": 95},
    ),
]


def summary_text(metrics: CollectedMetrics) -> str:
    return (
        f"AD Database: {metrics.database_size_mb:.2f} MB, "
        f"Whitespace: {metrics.whitespace_mb:.2f} MB ({metrics.whitespace_percentage:g}%), "
        f"Drive Free: {metrics.drive_free_mb:.2f} MB"
    )


def _channel_entry(channel: Channel, metrics: CollectedMetrics) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "channel": channel.name,
        "value": getattr(metrics, channel.attr),
        "unit": channel.unit,
        "float": 1,
    }
    if channel.custom_unit:
        entry["customunit"] = channel.custom_unit
    if channel.limits:
        entry["limitmode"] = 1
        entry.update(channel.limits)
    return entry


def format_report(report: Report) -> Dict[str, Any]:
    """Serialize a Report into the PRTG EXE/Script Advanced structure."""
    if isinstance(report, ProbeSuccess):
        return {
            "prtg": {
                "result": [_channel_entry(c, report.metrics) for c in CHANNELS],
                "text": summary_text(report.metrics),
            }
        }
    return {
        "prtg": {
            "error": report.code,
            "text": ERROR_PREFIX + report.message,
        }
    }


def render_report(report: Report) -> str:
    return json.dumps(format_report(report), indent=2)


def emit_report(report: Report, output_file: Optional[str] = None) -> None:
    """Write the report to stdout (and optionally to a file). Last action of a run."""
    rendered = render_report(report)
    sys.stdout.write(rendered + "\n")
    sys.stdout.flush()
    if output_file:
        try:
            Path(output_file).write_text(rendered + "\n")
        except OSError as e:
            console.print(f"  [warn]Could not write report to {output_file}: {e}[/warn]")
            return
        console.print(f"  [info]Report written to {output_file}[/info]")


def print_debug(stage: str, **fields: Any) -> None:
    """Print a raw unformatted debug line to stderr."""
    parts = [f"[DEBUG] {stage}"] + [f"{k}={v}" for k, v in fields.items()]
    console.print(" | ".join(parts), style="debug", markup=False, highlight=False)


def print_channels_table(metrics: CollectedMetrics) -> None:
    """Print a Rich table of the collected channels."""
    table = Table(
        title="NTDS Database Metrics",
        show_header=True,
        header_style="table.header",
        border_style=MOCHA["surface2"],
        title_style=f"bold {MOCHA['mauve']}",
    )
    table.add_column("Channel", style="table.channel")
    table.add_column("Value", style="table.value", justify="right")
    table.add_column("Unit", style="table.unit")
    table.add_column("Limits", style="table.limit")

    for channel in CHANNELS:
        unit = channel.custom_unit or "%"
        limits = ", ".join(f"{k[5:]}={v:g}" for k, v in channel.limits.items())
        table.add_row(channel.name, f"{getattr(metrics, channel.attr):.2f}", unit, limits)

    console.print()
    console.print(table)
    console.print(f"  [label]Database:[/label] [value]{metrics.database_path or 'unknown'}[/value]")


def print_summary(report: Report) -> None:
    if isinstance(report, ProbeFailure):
        console.print(f"  [failure]FAILED (code {report.code}):[/failure] [error]{report.message}[/error]")
    else:
        console.print(f"  [success]OK:[/success] [value]{summary_text(report.metrics)}[/value]")
