from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

OverrideResponse = Literal["yes", "conditional", "no"]


def _normalize_terms(values: list[str] | None) -> list[str]:
    seen: dict[str, None] = {}
    for value in values or []:
        if not isinstance(value, str):
            continue
        term = " ".join(value.lower().split())
        if term:
            seen.setdefault(term, None)
    return list(seen)


class TechDomain(BaseModel):
    """Administrator-maintained technology/role domain row."""

    key: str = Field(validation_alias="domain_key")
    display_name: str = ""
    display_name_de: str | None = None
    primary_skills: list[str] = Field(default_factory=list)
    secondary_skills: list[str] = Field(default_factory=list)
    title_keywords: list[str] = Field(default_factory=list)
    transferable_to: list[str] = Field(default_factory=list)
    incompatible_with: list[str] = Field(default_factory=list)
    weight: float = 1.0
    active: bool = True

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    @field_validator("key", mode="before")
    @classmethod
    def _normalize_key(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator(
        "primary_skills",
        "secondary_skills",
        "title_keywords",
        "transferable_to",
        "incompatible_with",
        mode="before",
    )
    @classmethod
    def _normalize_vocabulary(cls, value):
        return _normalize_terms(value)

    @field_validator("weight", mode="before")
    @classmethod
    def _default_weight(cls, value):
        return 1.0 if value is None else value

    @field_validator("active", mode="before")
    @classmethod
    def _default_active(cls, value):
        return True if value is None else value


class CommuteOverride(BaseModel):
    """Recorded human answer about accepting a longer commute for one job."""

    candidate_id: str
    job_id: str
    accepted_commute_minutes: int | None = None
    response: OverrideResponse | None = None
    responded_at: datetime | None = None
    notes: str | None = Field(default=None, validation_alias="response_notes")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @property
    def is_accepted(self) -> bool:
        return self.response == "yes"


class CommuteEstimate(BaseModel):
    """Travel time resolved by an external lookup."""

    minutes: float = Field(ge=0)
    mode: str | None = None
    source: str | None = None

    model_config = ConfigDict(extra="forbid")
