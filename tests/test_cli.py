"""CLI contract tests: one report on stdout, exit status carries the error code."""

import json

from click.testing import CliRunner

import core.engine
from conftest import FakeConnector, FakeSource
from core.models import TargetKind
from ntds_monitor import main

ARGS = ["-c", "dc01.corp.local", "-u", "monitor", "-p", "S3cretPassw0rd"]


def _install(monkeypatch, connector, seen=None):
    def factory(kind):
        if seen is not None:
            seen.append(kind)
        return connector

    monkeypatch.setattr(core.engine, "get_connector", factory)


def test_success_emits_prtg_result(monkeypatch):
    seen = []
    _install(monkeypatch, FakeConnector(), seen)

    result = CliRunner().invoke(main, ARGS)

    assert result.exit_code == 0, result.output
    report = json.loads(result.stdout)
    assert len(report["prtg"]["result"]) == 5
    assert report["prtg"]["text"].startswith("AD Database: 15.00 MB")
    assert seen == [TargetKind.NAME]


def test_ip_target_uses_address_path(monkeypatch):
    seen = []
    _install(monkeypatch, FakeConnector(), seen)

    result = CliRunner().invoke(main, ["-c", "10.0.0.5", "-u", "monitor", "-p", "pw"])

    assert result.exit_code == 0
    assert seen == [TargetKind.ADDRESS]


def test_failure_exit_code_matches_report(monkeypatch):
    _install(monkeypatch, FakeConnector(open_error=OSError("The network path was not found.")))

    result = CliRunner().invoke(main, ARGS)

    assert result.exit_code == 4
    report = json.loads(result.stdout)
    assert report["prtg"]["error"] == 4
    assert report["prtg"]["text"].startswith(
        "Error monitoring AD database: The network path was not found."
    )


def test_zero_sized_drive_reports_failure(monkeypatch):
    _install(monkeypatch, FakeConnector(source=FakeSource(drive=(0, 0))))

    result = CliRunner().invoke(main, ARGS)

    assert result.exit_code == 1
    report = json.loads(result.stdout)
    assert "result" not in report["prtg"]
    assert "NaN" not in result.stdout


def test_whitespace_percent_option(monkeypatch):
    _install(monkeypatch, FakeConnector())

    result = CliRunner().invoke(main, ARGS + ["--whitespace-percent", "10"])

    channels = {c["channel"]: c["value"] for c in json.loads(result.stdout)["prtg"]["result"]}
    assert channels["AD Database Whitespace (%)"] == 10.0
    assert channels["AD Database Whitespace (MB)"] == 1.5


def test_output_file(monkeypatch, tmp_path):
    _install(monkeypatch, FakeConnector())
    out = tmp_path / "report.json"

    result = CliRunner().invoke(main, ARGS + ["-o", str(out)])

    assert result.exit_code == 0
    assert json.loads(out.read_text())["prtg"]["result"][0]["value"] == 15.0


def test_missing_required_option():
    result = CliRunner().invoke(main, ["-c", "dc01"])
    assert result.exit_code == 2
