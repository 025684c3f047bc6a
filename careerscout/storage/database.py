"""SQLite storage for job-seeker submissions and run history."""

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from pathlib import Path

from careerscout.models.criteria import Submission
from careerscout.models.results import RunSummary

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS submissions (
    id            TEXT PRIMARY KEY,
    email         TEXT NOT NULL,
    companies     TEXT NOT NULL,  -- JSON list
    roles         TEXT NOT NULL,  -- JSON list
    seniority     TEXT,
    cities        TEXT NOT NULL,  -- JSON list
    visa_required INTEGER DEFAULT 0,
    template_path TEXT,
    frequency     TEXT NOT NULL DEFAULT 'once',
    status        TEXT NOT NULL DEFAULT 'pending',
    created_at    TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_submissions_email ON submissions(email);

CREATE TABLE IF NOT EXISTS runs (
    run_id             INTEGER PRIMARY KEY AUTOINCREMENT,
    submission_id      TEXT,
    run_date           TEXT NOT NULL,
    total_companies    INTEGER DEFAULT 0,
    successful_matches INTEGER DEFAULT 0,
    no_matches         INTEGER DEFAULT 0,
    errors             INTEGER DEFAULT 0,
    total_jobs         INTEGER DEFAULT 0,
    notes              TEXT,  -- JSON list
    email_sent         INTEGER DEFAULT 0,
    duration_secs      REAL,
    created_at         TEXT NOT NULL DEFAULT (datetime('now'))
);
"""


class SubmissionRepository:
    """SQLite-backed store for submissions (read-only to the pipeline) and run logs."""

    def __init__(self, db_path: str = "careerscout.db") -> None:
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        self._init_schema()

    def _init_schema(self) -> None:
        self._conn.executescript(SCHEMA_SQL)
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()

    # -- Submissions ------------------------------------------------------------

    def add_submission(self, submission: Submission) -> str:
        """Store a submission, assigning an id if it has none. Returns the id."""
        submission_id = submission.id or str(uuid.uuid4())
        self._conn.execute(
            """
            INSERT INTO submissions (
                id, email, companies, roles, seniority, cities,
                visa_required, template_path, frequency, status
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                submission_id,
                submission.email,
                json.dumps(submission.companies),
                json.dumps(submission.roles),
                submission.seniority,
                json.dumps(submission.cities),
                int(submission.visa_required),
                submission.template_path,
                submission.frequency,
                submission.status,
            ),
        )
        self._conn.commit()
        logger.info("Submission %s saved for %s", submission_id, submission.email)
        return submission_id

    def get_submission(self, submission_id: str) -> Submission | None:
        row = self._conn.execute(
            "SELECT * FROM submissions WHERE id = ?", (submission_id,)
        ).fetchone()
        if row is None:
            return None
        return Submission(
            id=row["id"],
            email=row["email"],
            companies=json.loads(row["companies"]),
            roles=json.loads(row["roles"]),
            seniority=row["seniority"],
            cities=json.loads(row["cities"]),
            visa_required=bool(row["visa_required"]),
            template_path=row["template_path"],
            frequency=row["frequency"],
            status=row["status"],
        )

    # -- Run logging ------------------------------------------------------------

    def log_run(
        self,
        run_date: str,
        summary: RunSummary | None,
        submission_id: str | None = None,
        notes: list[str] | None = None,
        email_sent: bool = False,
        duration_secs: float | None = None,
    ) -> None:
        """Log a pipeline run."""
        summary = summary or RunSummary()
        self._conn.execute(
            """
            INSERT INTO runs (submission_id, run_date, total_companies, successful_matches,
                              no_matches, errors, total_jobs, notes, email_sent, duration_secs)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                submission_id,
                run_date,
                summary.total_companies,
                summary.successful_matches,
                summary.no_matches,
                summary.errors,
                summary.total_jobs,
                json.dumps(notes or []),
                int(email_sent),
                duration_secs,
            ),
        )
        self._conn.commit()

    def get_runs(self, submission_id: str) -> list[dict]:
        rows = self._conn.execute(
            "SELECT * FROM runs WHERE submission_id = ? ORDER BY run_id", (submission_id,)
        ).fetchall()
        return [dict(row) for row in rows]
