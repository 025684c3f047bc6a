"""Pydantic models for job-seeker submissions and the per-run search criteria."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def normalize_key(value: str) -> str:
    """Case/whitespace-insensitive key used for de-duplicating names and roles."""
    return " ".join(value.split()).casefold()


def unique_ordered(values: list[str] | tuple[str, ...]) -> list[str]:
    """Strip, drop blanks and de-duplicate by normalized key, keeping first occurrence."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        if not isinstance(value, str):
            continue
        cleaned = " ".join(value.split())
        key = normalize_key(cleaned)
        if not key or key in seen:
            continue
        seen.add(key)
        result.append(cleaned)
    return result


class Submission(BaseModel):
    """A job-seeker's stored request, as read from the submission store."""

    id: str = ""
    email: str = ""
    companies: list[str] = Field(default_factory=list)
    roles: list[str] = Field(default_factory=list)
    seniority: str | None = None
    cities: list[str] = Field(default_factory=list)
    visa_required: bool = False
    template_path: str | None = None
    frequency: str = "once"
    status: str = "pending"

    @field_validator("seniority")
    @classmethod
    def blank_seniority_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    def to_criteria(self) -> "SearchCriteria":
        """Criteria before role expansion (``expanded_roles == roles``)."""
        return SearchCriteria(
            roles=tuple(self.roles),
            seniority=self.seniority,
            cities=tuple(self.cities),
            visa_required=self.visa_required,
        )


class SearchCriteria(BaseModel):
    """Immutable matching criteria for one pipeline run."""

    model_config = ConfigDict(frozen=True)

    roles: tuple[str, ...]
    expanded_roles: tuple[str, ...] = ()
    seniority: str | None = None
    cities: tuple[str, ...] = ()
    visa_required: bool = False

    @model_validator(mode="before")
    @classmethod
    def expanded_covers_roles(cls, data: object) -> object:
        # Original roles always lead and are never dropped.
        if isinstance(data, dict):
            roles = list(data.get("roles") or ())
            expanded = list(data.get("expanded_roles") or ())
            data = {**data, "expanded_roles": roles + expanded}
        return data

    @field_validator("roles", "expanded_roles", "cities", mode="before")
    @classmethod
    def dedupe(cls, v: list[str] | tuple[str, ...]) -> tuple[str, ...]:
        return tuple(unique_ordered(list(v or ())))

    def with_expanded_roles(self, expanded: list[str] | tuple[str, ...]) -> "SearchCriteria":
        return SearchCriteria(
            roles=self.roles,
            expanded_roles=tuple(expanded),
            seniority=self.seniority,
            cities=self.cities,
            visa_required=self.visa_required,
        )

    @property
    def primary_role(self) -> str | None:
        return self.roles[0] if self.roles else None
