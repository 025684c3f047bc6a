"""Tests for the CLI entrypoint with a stubbed pipeline."""

from __future__ import annotations

import json
import sqlite3
import sys
from pathlib import Path

import pytest

import main
from careerscout import graph
from careerscout.errors import ValidationError
from careerscout.models.criteria import Submission
from careerscout.models.results import CompanyResult, RunSummary
from careerscout.storage import database
from careerscout.storage.database import SubmissionRepository


class StubPipeline:
    def __init__(self, result: dict | None = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error

    def invoke(self, state: dict) -> dict:
        if self.error is not None:
            raise self.error
        return self.result


def _result() -> dict:
    summary = RunSummary()
    summary.add(CompanyResult.no_matches("Acme", "https://acme.com/careers", "No job listings found on careers page"))
    return {
        "submission": Submission(id="criteria", email="seeker@example.com"),
        "summary": summary.finalize(),
        "errors": ["Company expansion unavailable: Connection refused"],
        "email_sent": False,
    }


@pytest.fixture
def cli(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("DB_PATH", "POLICY_PATH", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    def run(pipeline: StubPipeline, *argv: str) -> None:
        monkeypatch.setattr(graph, "build_pipeline", lambda settings: pipeline)
        monkeypatch.setattr(sys, "argv", ["main.py", "--no-email", *argv])
        main.main()

    return run


class TestMain:
    """Test suite for CLI exit codes and run logging."""

    def test_run_logged_and_summary_written(self, cli, tmp_path: Path) -> None:
        cli(StubPipeline(_result()), "--output", "summary.json")

        payload = json.loads((tmp_path / "summary.json").read_text())
        assert payload["totalCompanies"] == 1
        assert payload["noMatches"] == 1

        repo = SubmissionRepository(str(tmp_path / "careerscout.db"))
        runs = repo.get_runs("criteria")
        repo.close()
        assert len(runs) == 1
        assert runs[0]["no_matches"] == 1

    def test_rejected_request_exits_2(self, cli) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli(StubPipeline(error=ValidationError("Invalid request: at least one company is required")))
        assert exc_info.value.code == 2

    def test_pipeline_crash_exits_1(self, cli) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli(StubPipeline(error=RuntimeError("boom")))
        assert exc_info.value.code == 1

    def test_run_log_failure_exits_1(self, cli, monkeypatch) -> None:
        closed = []

        class LockedRepository:
            def __init__(self, db_path: str) -> None:
                pass

            def log_run(self, **kwargs) -> None:
                raise sqlite3.OperationalError("database is locked")

            def close(self) -> None:
                closed.append(True)

        monkeypatch.setattr(database, "SubmissionRepository", LockedRepository)
        with pytest.raises(SystemExit) as exc_info:
            cli(StubPipeline(_result()))

        assert exc_info.value.code == 1
        assert closed == [True]
