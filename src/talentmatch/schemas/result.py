"""Match result payload returned by every evaluation."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PolicyTier = Literal["hot", "standard", "maybe", "hidden"]

TIER_RANK: dict[str, int] = {"hot": 3, "standard": 2, "maybe": 1, "hidden": 0}


class _Payload(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )


class SkillDetails(_Payload):
    matched: list[str] = Field(default_factory=list)
    transferable: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    must_have_missing: list[str] = Field(default_factory=list)


class FitDetails(_Payload):
    skills: SkillDetails = Field(default_factory=SkillDetails)


class FitBreakdown(_Payload):
    skills: int
    experience: int
    seniority: int


class FitScore(_Payload):
    score: int
    breakdown: FitBreakdown
    details: FitDetails = Field(default_factory=FitDetails)


class ConstraintBreakdown(_Payload):
    salary: int
    commute: int
    start_date: int


class ConstraintScore(_Payload):
    score: int
    breakdown: ConstraintBreakdown


class Dealbreakers(_Payload):
    salary: float = 1.0
    start_date: float = 1.0
    seniority: float = 1.0
    work_model: float = 1.0
    tech_domain: float = 1.0

    def product(self) -> float:
        return (
            self.salary
            * self.start_date
            * self.seniority
            * self.work_model
            * self.tech_domain
        )


class DomainMismatch(_Payload):
    is_incompatible: bool
    candidate_domain: str
    job_domain: str


HardKillCategory = Literal["visa", "language", "onsite", "license"]


class HardKill(_Payload):
    """A rule that excludes the pair outright."""

    category: HardKillCategory
    reason: str


class Gates(_Payload):
    dealbreakers: Dealbreakers = Field(default_factory=Dealbreakers)
    domain_mismatch: DomainMismatch | None = None
    hard_kill: HardKill | None = None


class EnhancedReason(_Payload):
    text: str
    impact: Literal["high", "medium", "low"]
    category: Literal["skills", "experience", "salary", "availability", "location", "domain"]


class EnhancedRisk(_Payload):
    text: str
    severity: Literal["critical", "warning", "info"]
    mitigatable: bool
    mitigation: str | None = None
    category: Literal[
        "skills", "experience", "salary", "timing", "seniority", "domain", "location", "data",
        "eligibility",
    ]


class RecruiterAction(_Payload):
    recommendation: Literal["proceed", "review", "skip"]
    priority: Literal["high", "medium", "low"]
    next_steps: list[str] = Field(default_factory=list)
    talking_points: list[str] = Field(default_factory=list)


class BasicExplainability(_Payload):
    kind: Literal["basic"] = "basic"
    top_reasons: list[str] = Field(default_factory=list)
    top_risks: list[str] = Field(default_factory=list)
    next_action: str | None = None
    why_not: str | None = None
    notes: list[str] = Field(default_factory=list)


class EnhancedExplainability(BasicExplainability):
    kind: Literal["enhanced"] = "enhanced"  # type: ignore[assignment]
    enhanced_reasons: list[EnhancedReason] = Field(default_factory=list)
    enhanced_risks: list[EnhancedRisk] = Field(default_factory=list)
    recruiter_action: RecruiterAction | None = None


Explainability = Annotated[
    Union[BasicExplainability, EnhancedExplainability],
    Field(discriminator="kind"),
]


class MatchResult(_Payload):
    """Immutable outcome of one candidate/job evaluation."""

    candidate_id: str
    job_id: str
    version: str = "v3.1"
    overall: int = Field(ge=0, le=100)
    fit: FitScore
    constraints: ConstraintScore
    gate_multiplier: float = Field(ge=0.0, le=1.0)
    gates: Gates
    must_have_coverage: float = Field(ge=0.0, le=1.0)
    policy: PolicyTier
    explainability: Explainability

    @property
    def tier_rank(self) -> int:
        return TIER_RANK[self.policy]

    def to_payload(self) -> dict:
        """Serialize using the camelCase wire names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
