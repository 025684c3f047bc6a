"""Per-company results and the run-level summary accumulator."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import Field, computed_field, model_validator

from careerscout.models.job import CamelModel, JobMatch


class CompanyStatus(str, Enum):
    SUCCESS = "success"
    NO_MATCHES = "no_matches"
    ERROR = "error"


class CompanyResult(CamelModel):
    """Outcome for one company in one run."""

    company: str
    careers_url: str | None = None
    status: CompanyStatus
    message: str | None = None
    jobs: list[JobMatch] = Field(default_factory=list)

    @model_validator(mode="after")
    def success_iff_jobs(self) -> "CompanyResult":
        if (self.status == CompanyStatus.SUCCESS) != bool(self.jobs):
            raise ValueError("status must be 'success' exactly when jobs are present")
        return self

    @classmethod
    def error(cls, company: str, careers_url: str | None, message: str) -> "CompanyResult":
        return cls(company=company, careers_url=careers_url, status=CompanyStatus.ERROR, message=message)

    @classmethod
    def no_matches(cls, company: str, careers_url: str | None, message: str) -> "CompanyResult":
        return cls(
            company=company, careers_url=careers_url, status=CompanyStatus.NO_MATCHES, message=message
        )


class RunSummary(CamelModel):
    """Accumulates company results in processing order.

    Owned by the orchestrator for the duration of a run and handed to the
    notification collaborator once every company has a result.
    """

    results: list[CompanyResult] = Field(default_factory=list)
    processed_at: datetime | None = None

    def add(self, result: CompanyResult) -> None:
        self.results.append(result)

    def finalize(self) -> "RunSummary":
        self.processed_at = datetime.now(timezone.utc)
        return self

    def _count(self, status: CompanyStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @computed_field(alias="totalCompanies")  # type: ignore[prop-decorator]
    @property
    def total_companies(self) -> int:
        return len(self.results)

    @computed_field(alias="successfulMatches")  # type: ignore[prop-decorator]
    @property
    def successful_matches(self) -> int:
        return self._count(CompanyStatus.SUCCESS)

    @computed_field(alias="noMatches")  # type: ignore[prop-decorator]
    @property
    def no_matches(self) -> int:
        return self._count(CompanyStatus.NO_MATCHES)

    @computed_field(alias="errors")  # type: ignore[prop-decorator]
    @property
    def errors(self) -> int:
        return self._count(CompanyStatus.ERROR)

    @property
    def total_jobs(self) -> int:
        return sum(len(r.jobs) for r in self.results)

    def to_payload(self) -> dict:
        """Run-level output with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
