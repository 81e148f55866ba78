"""Tests for the end-to-end audit pipeline with stubbed collaborators."""

import pytest

from maintenance_score.auditor import MaintenanceAuditor
from maintenance_score.errors import ManifestError, NotFoundError
from maintenance_score.models import DeclaredDependency, FetchFailure, MaintenanceAssessment
from maintenance_score.scoring import calculate_score


class StubReader:
    def __init__(self, names=None, error=None):
        self.names = names or []
        self.error = error

    def read(self, manifest_path):
        if self.error:
            raise self.error
        return [DeclaredDependency(name=n) for n in self.names]


class StubClient:
    def __init__(self, missing=()):
        self.missing = set(missing)
        self.calls = []

    def fetch(self, name):
        self.calls.append(name)
        if name in self.missing:
            return FetchFailure(NotFoundError(name))
        days = {"tokio": 10, "serde": 45, "rand": 400}.get(name, 100)
        score, tier = calculate_score(days, 0)
        return MaintenanceAssessment(days, 0, "1.0.0", score, tier)


def test_run_fetches_each_name_once_in_order():
    client = StubClient()
    auditor = MaintenanceAuditor(StubReader(["tokio", "serde", "rand", "serde"]), client)

    report = auditor.run("Cargo.toml")

    assert client.calls == ["rand", "serde", "tokio"]
    assert [e.name for e in report.entries] == ["rand", "serde", "tokio"]
    assert (report.high, report.medium, report.low) == (1, 0, 2)


def test_not_found_does_not_stop_batch():
    client = StubClient(missing={"ghost"})
    auditor = MaintenanceAuditor(StubReader(["tokio", "ghost", "serde"]), client)

    report = auditor.run("Cargo.toml")

    assert client.calls == ["ghost", "serde", "tokio"]
    assert report.entries[0].name == "ghost"
    assert not report.entries[0].succeeded
    assert report.total == 3


def test_manifest_error_aborts_before_fetch():
    client = StubClient()
    auditor = MaintenanceAuditor(StubReader(error=ManifestError("no manifest")), client)

    with pytest.raises(ManifestError):
        auditor.run("missing/Cargo.toml")
    assert client.calls == []


def test_empty_project_makes_no_requests():
    client = StubClient()
    report = MaintenanceAuditor(StubReader([]), client).run("Cargo.toml")

    assert client.calls == []
    assert report.total == 0


def test_progress_callback_receives_each_outcome():
    seen = []
    auditor = MaintenanceAuditor(
        StubReader(["b", "a"]),
        StubClient(missing={"b"}),
        progress=lambda i, total, name, outcome: seen.append((i, total, name, type(outcome).__name__)),
    )

    auditor.run("Cargo.toml")

    assert seen == [(1, 2, "a", "MaintenanceAssessment"), (2, 2, "b", "FetchFailure")]


def test_fetch_start_hook_runs_before_each_fetch():
    events = []

    class RecordingClient(StubClient):
        def fetch(self, name):
            events.append(("fetch", name))
            return super().fetch(name)

    auditor = MaintenanceAuditor(
        StubReader(["b", "a"]),
        RecordingClient(),
        progress=lambda i, total, name, outcome: events.append(("done", name)),
        on_fetch_start=lambda i, total, name: events.append(("start", name)),
    )

    auditor.run("Cargo.toml")

    assert events == [
        ("start", "a"), ("fetch", "a"), ("done", "a"),
        ("start", "b"), ("fetch", "b"), ("done", "b"),
    ]
