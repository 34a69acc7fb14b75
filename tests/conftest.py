"""Shared fakes for probe tests."""

import pytest

from connectors.base import Connector, Session
from core.collector import collect_metrics
from core.models import ConnectionMode, Credential, ProbeSettings, Target, TargetKind

DB_PATH = r"C:\Windows\NTDS\ntds.dit"


class FakeSource:
    """In-memory stand-in for the three WMI lookups."""

    def __init__(self, path=DB_PATH, size=15_728_640, drive=(100_000_000_000, 15_000_000_000)):
        self.path = path
        self.size = size
        self.drive = drive
        self.calls = []

    def read_database_path(self):
        self.calls.append("path")
        return self.path

    def get_file_size(self, path):
        self.calls.append(("size", path))
        return self.size

    def get_drive_space(self, drive):
        self.calls.append(("drive", drive))
        return self.drive


class FakeSession(Session):
    mode = ConnectionMode.DIRECT_MANAGEMENT

    def __init__(self, target, source=None, error=None):
        super().__init__(target)
        self.source = source or FakeSource()
        self.error = error
        self.release_count = 0

    def collect(self, settings):
        if self.error is not None:
            raise self.error
        return collect_metrics(self.source, settings.whitespace_percentage)

    def _release(self):
        self.release_count += 1


class FakeConnector(Connector):
    name = "fake"
    mode = ConnectionMode.DIRECT_MANAGEMENT

    def __init__(self, source=None, open_error=None, collect_error=None):
        self.source = source
        self.open_error = open_error
        self.collect_error = collect_error
        self.sessions = []

    def open(self, target, credential, settings):
        if self.open_error is not None:
            raise self.open_error
        session = FakeSession(target, self.source, self.collect_error)
        self.sessions.append(session)
        return session


@pytest.fixture
def credential():
    return Credential(username="CORP\\monitor", password="S3cretPassw0rd")


@pytest.fixture
def address_target():
    return Target(host="10.0.0.5", kind=TargetKind.ADDRESS)


@pytest.fixture
def name_target():
    return Target(host="dc01.corp.local", kind=TargetKind.NAME)


@pytest.fixture
def settings():
    return ProbeSettings()
