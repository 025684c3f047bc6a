"""Pydantic schemas for model responses, and the tagged stage outcome."""

from __future__ import annotations

from typing import Generic, Literal, TypeVar

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

T = TypeVar("T")


class StageResult(BaseModel, Generic[T]):
    """Outcome of a best-effort stage: either the parsed value or its fallback."""

    value: T
    fell_back: bool = False
    reason: str | None = None

    @classmethod
    def ok(cls, value: T) -> "StageResult[T]":
        return cls(value=value)

    @classmethod
    def fallback(cls, value: T, reason: str) -> "StageResult[T]":
        return cls(value=value, fell_back=True, reason=reason)


def _string_list(v: object) -> list[str]:
    if not isinstance(v, list):
        raise ValueError("expected a list of strings")
    return [item.strip() for item in v if isinstance(item, str) and item.strip()]


class CompanyExpansionOutput(BaseModel):
    """Sibling companies suggested for the seed list."""

    companies: list[str]

    @model_validator(mode="before")
    @classmethod
    def accept_bare_array(cls, data: object) -> object:
        if isinstance(data, list):
            return {"companies": data}
        return data

    @field_validator("companies", mode="before")
    @classmethod
    def clean(cls, v: object) -> list[str]:
        return _string_list(v)


class RoleExpansionOutput(BaseModel):
    """Similar job titles for the seeker's roles."""

    expanded_roles: list[str] = Field(
        validation_alias=AliasChoices("expandedRoles", "expanded_roles", "roles")
    )

    @model_validator(mode="before")
    @classmethod
    def accept_bare_array(cls, data: object) -> object:
        if isinstance(data, list):
            return {"expandedRoles": data}
        return data

    @field_validator("expanded_roles", mode="before")
    @classmethod
    def clean(cls, v: object) -> list[str]:
        return _string_list(v)


class CareersUrlOutput(BaseModel):
    """Best-guess careers page for one company."""

    careers_url: str = Field(validation_alias=AliasChoices("careersUrl", "careers_url", "url"))
    confidence: Literal["high", "medium", "low"] = "low"

    @field_validator("confidence", mode="before")
    @classmethod
    def normalize_confidence(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v


class CvCustomizationOutput(BaseModel):
    """A rewritten CV and the itemized list of what changed."""

    customized_cv: str = Field(
        min_length=1, validation_alias=AliasChoices("customizedCv", "customized_cv", "cv")
    )
    changes: list[str] = Field(default_factory=list)

    @field_validator("customized_cv", mode="before")
    @classmethod
    def strip_cv(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("changes", mode="before")
    @classmethod
    def clean(cls, v: object) -> list[str]:
        return _string_list(v)[:10]
