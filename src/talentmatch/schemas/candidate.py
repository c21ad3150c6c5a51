from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

WorkModel = Literal["remote", "hybrid", "onsite", "flexible"]
SeniorityLevel = Literal["junior", "mid", "senior", "lead", "director"]

SENIORITY_LEVELS: tuple[str, ...] = ("junior", "mid", "senior", "lead", "director")
WORK_MODELS: tuple[str, ...] = ("remote", "hybrid", "onsite", "flexible")
LANGUAGE_LEVELS: tuple[str, ...] = ("a1", "a2", "b1", "b2", "c1", "c2", "native")

_SENIORITY_ALIASES: dict[str, str] = {
    "entry": "junior",
    "graduate": "junior",
    "intern": "junior",
    "intermediate": "mid",
    "medior": "mid",
    "professional": "mid",
    "staff": "senior",
    "principal": "lead",
    "head": "lead",
    "manager": "lead",
    "vp": "director",
    "c-level": "director",
}

_WORK_MODEL_ALIASES: dict[str, str] = {
    "remote_only": "remote",
    "fully_remote": "remote",
    "on_site": "onsite",
    "onsite_only": "onsite",
    "office": "onsite",
    "any": "flexible",
}


def normalize_seniority(value: str | None) -> str | None:
    """Map a free-form seniority tag onto the five-level scale."""
    if value is None:
        return None
    key = value.strip().lower()
    if not key:
        return None
    key = _SENIORITY_ALIASES.get(key, key)
    return key if key in SENIORITY_LEVELS else None


def normalize_work_model(value: str | None) -> str | None:
    """Map a free-form work-model tag onto the four offered models."""
    if value is None:
        return None
    key = "_".join(value.lower().replace("-", " ").split())
    if not key:
        return None
    key = _WORK_MODEL_ALIASES.get(key, key)
    return key if key in WORK_MODELS else None


class GeoPoint(BaseModel):
    """Latitude/longitude pair."""

    lat: float
    lng: float

    model_config = ConfigDict(extra="forbid")


class SalaryExpectation(BaseModel):
    """Candidate salary expectation as a point, a range, or both."""

    expected: int | None = None
    minimum: int | None = None
    maximum: int | None = None

    model_config = ConfigDict(extra="forbid")

    @property
    def acceptable_minimum(self) -> int | None:
        """Lowest figure the candidate would accept."""
        if self.minimum is not None:
            return self.minimum
        if self.expected is not None:
            return self.expected
        return self.maximum

    @property
    def expectation(self) -> int | None:
        """Point expectation, falling back to the middle of the range."""
        if self.expected is not None:
            return self.expected
        if self.minimum is not None and self.maximum is not None:
            return (self.minimum + self.maximum) // 2
        if self.minimum is not None:
            return self.minimum
        return self.maximum

    @property
    def is_empty(self) -> bool:
        return self.expected is None and self.minimum is None and self.maximum is None


def normalize_language_level(value: str | None) -> str | None:
    if value is None:
        return None
    key = value.strip().lower()
    return key if key in LANGUAGE_LEVELS else None


class LanguageSkill(BaseModel):
    """A spoken language with an optional CEFR level."""

    language: str = Field(validation_alias=AliasChoices("language", "code"))
    level: str | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("language", mode="before")
    @classmethod
    def _normalize_language(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value):
        return normalize_language_level(value) if isinstance(value, str) else value


class CommutePreference(BaseModel):
    """Maximum acceptable one-way commute."""

    max_minutes: int | None = None
    mode: str = "car"

    model_config = ConfigDict(extra="forbid")


class CandidateProfile(BaseModel):
    """Read-only candidate record consumed by the engine."""

    candidate_id: str
    name: str | None = None
    current_title: str | None = None
    skills: list[str] = Field(default_factory=list)
    years_experience: float | None = None
    seniority: SeniorityLevel | None = None
    salary: SalaryExpectation | None = None
    city: str | None = None
    coordinates: GeoPoint | None = None
    commute: CommutePreference = Field(default_factory=CommutePreference)
    available_from: date | None = None
    notice_period_days: int | None = None
    work_model: WorkModel | None = None
    visa_required: bool = False
    languages: list[LanguageSkill] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    domain: str | None = None
    profile_version: int = 1

    model_config = ConfigDict(extra="allow")

    @field_validator("seniority", mode="before")
    @classmethod
    def _coerce_seniority(cls, value):
        if value is None or not isinstance(value, str):
            return value
        return normalize_seniority(value)

    @field_validator("work_model", mode="before")
    @classmethod
    def _coerce_work_model(cls, value):
        if value is None or not isinstance(value, str):
            return value
        return normalize_work_model(value)

    @field_validator("certifications", mode="before")
    @classmethod
    def _drop_blank_certifications(cls, value):
        if value is None:
            return []
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]

    @field_validator("skills", mode="before")
    @classmethod
    def _drop_blank_skills(cls, value):
        if value is None:
            return []
        return [item for item in value if isinstance(item, str) and item.strip()]
