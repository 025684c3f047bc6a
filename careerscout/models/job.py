"""Pydantic models for companies, crawled links, job pages and matches."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CamelModel(BaseModel):
    """Base for models that leave the pipeline as camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CompanyTarget(CamelModel):
    """A company with its resolved careers page."""

    company: str
    careers_url: str | None = None
    confidence: Confidence = Confidence.LOW


class RawAnchor(BaseModel):
    """An ``<a>`` element as extracted from the DOM, before classification."""

    href: str = ""
    text: str = ""
    title: str = ""
    aria_label: str = ""


class CandidateLink(BaseModel):
    """An anchor provisionally believed to point to a job posting."""

    model_config = ConfigDict(frozen=True)

    href: str
    anchor_text: str
    aria_label: str | None = None


class JobPageSnapshot(BaseModel):
    """Title, bounded body text and location captured once from a job page."""

    model_config = ConfigDict(frozen=True)

    title: str = "Job Position"
    body_text: str = ""
    location: str | None = None


class JobListing(CamelModel):
    """The job details reported for an accepted match."""

    title: str
    location: str
    description: str
    url: str


class JobMatch(CamelModel):
    """An accepted posting together with the CV tailored for it."""

    job: JobListing
    customized_cv: str
    cv_changes: list[str] = Field(default_factory=list)
