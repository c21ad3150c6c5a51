from __future__ import annotations

from datetime import date

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .candidate import (
    GeoPoint,
    SeniorityLevel,
    WorkModel,
    normalize_language_level,
    normalize_seniority,
    normalize_work_model,
)


class LanguageRequirement(BaseModel):
    language: str = Field(validation_alias=AliasChoices("language", "code"))
    min_level: str | None = Field(default=None, validation_alias=AliasChoices("min_level", "minLevel"))

    model_config = ConfigDict(extra="ignore")

    @field_validator("language", mode="before")
    @classmethod
    def _normalize_language(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("min_level", mode="before")
    @classmethod
    def _normalize_level(cls, value):
        return normalize_language_level(value) if isinstance(value, str) else value


class JobProfile(BaseModel):
    """Read-only job posting consumed by the engine."""

    job_id: str
    title: str | None = None
    must_have_skills: list[str] = Field(default_factory=list)
    nice_to_have_skills: list[str] = Field(default_factory=list)
    experience_min: float | None = None
    experience_max: float | None = None
    seniority: SeniorityLevel | None = None
    salary_min: int | None = None
    salary_max: int | None = None
    city: str | None = None
    coordinates: GeoPoint | None = None
    remote: bool = False
    onsite_days_per_week: int | None = Field(default=None, ge=0, le=7)
    start_by: date | None = None
    work_model: WorkModel | None = None
    onsite_required: bool = False
    visa_sponsorship: bool = False
    required_languages: list[LanguageRequirement] = Field(default_factory=list)
    required_certifications: list[str] = Field(default_factory=list)
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

    @field_validator("required_certifications", mode="before")
    @classmethod
    def _drop_blank_certifications(cls, value):
        if value is None:
            return []
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]

    @field_validator("must_have_skills", "nice_to_have_skills", mode="before")
    @classmethod
    def _drop_blank_skills(cls, value):
        if value is None:
            return []
        return [item for item in value if isinstance(item, str) and item.strip()]

    @model_validator(mode="after")
    def _order_ranges(self) -> "JobProfile":
        if (
            self.experience_min is not None
            and self.experience_max is not None
            and self.experience_min > self.experience_max
        ):
            self.experience_min, self.experience_max = self.experience_max, self.experience_min
        if (
            self.salary_min is not None
            and self.salary_max is not None
            and self.salary_min > self.salary_max
        ):
            self.salary_min, self.salary_max = self.salary_max, self.salary_min
        return self

    @property
    def effective_work_model(self) -> str | None:
        """Offered work model, inferring remote from the flag when unset."""
        if self.work_model is not None:
            return self.work_model
        if self.remote:
            return "remote"
        return None

    @property
    def is_remote(self) -> bool:
        return self.remote or self.work_model == "remote"
