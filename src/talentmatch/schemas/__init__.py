"\"\"\"Pydantic schema definitions for engine inputs and outputs.\"\"\""

from __future__ import annotations

from .candidate import (
    LANGUAGE_LEVELS,
    SENIORITY_LEVELS,
    CandidateProfile,
    CommutePreference,
    GeoPoint,
    LanguageSkill,
    SalaryExpectation,
)
from .domain import CommuteEstimate, CommuteOverride, TechDomain
from .job import JobProfile, LanguageRequirement
from .result import (
    TIER_RANK,
    BasicExplainability,
    ConstraintBreakdown,
    ConstraintScore,
    Dealbreakers,
    DomainMismatch,
    EnhancedExplainability,
    EnhancedReason,
    EnhancedRisk,
    FitBreakdown,
    FitDetails,
    FitScore,
    Gates,
    HardKill,
    MatchResult,
    PolicyTier,
    RecruiterAction,
    SkillDetails,
)

__all__ = [
    "LANGUAGE_LEVELS",
    "SENIORITY_LEVELS",
    "TIER_RANK",
    "BasicExplainability",
    "CandidateProfile",
    "CommuteEstimate",
    "CommuteOverride",
    "CommutePreference",
    "ConstraintBreakdown",
    "ConstraintScore",
    "Dealbreakers",
    "DomainMismatch",
    "EnhancedExplainability",
    "EnhancedReason",
    "EnhancedRisk",
    "FitBreakdown",
    "FitDetails",
    "FitScore",
    "Gates",
    "GeoPoint",
    "HardKill",
    "JobProfile",
    "LanguageRequirement",
    "LanguageSkill",
    "MatchResult",
    "PolicyTier",
    "RecruiterAction",
    "SalaryExpectation",
    "SkillDetails",
    "TechDomain",
]
