"\"\"\"Fit scoring: skills, experience and seniority.\"\"\""

from __future__ import annotations

from dataclasses import dataclass, field

from ...schemas import SENIORITY_LEVELS, CandidateProfile, JobProfile
from ...schemas.config import require_weights
from ..registry import DomainRegistry
from .base import NEUTRAL_SCORE, DataGap, clamp, round_score, weighted_average
from .skills import SkillMatch, SkillMatcher


@dataclass
class FitConfig:
    """Weights and penalties for fit scoring."""

    weights: dict[str, float] = None  # type: ignore[assignment]
    nice_to_have_bonus: float = 10.0
    under_experience_penalty: float = 20.0
    over_experience_penalty: float = 5.0
    seniority_level_penalty: float = 40.0

    def __post_init__(self) -> None:
        if self.weights is None:
            self.weights = {"skills": 0.50, "experience": 0.30, "seniority": 0.20}
        self.weights = require_weights(self.weights, section="fit.weights")


@dataclass(slots=True)
class FitAssessment:
    """Fit score with the intermediate values it was built from."""

    score: int
    skills: int
    experience: int
    seniority: int
    skill_match: SkillMatch
    seniority_distance: int | None = None
    experience_gap: float | None = None
    gaps: list[DataGap] = field(default_factory=list)


def seniority_distance(candidate_level: str | None, job_level: str | None) -> int | None:
    """Ordinal distance on the five-level scale, None when either side is unknown."""
    if candidate_level not in SENIORITY_LEVELS or job_level not in SENIORITY_LEVELS:
        return None
    return abs(SENIORITY_LEVELS.index(candidate_level) - SENIORITY_LEVELS.index(job_level))


class FitScorer:
    """Combine skill coverage, experience and seniority into a 0-100 fit score."""

    method = "fit"

    def __init__(
        self,
        *,
        skill_matcher: SkillMatcher | None = None,
        config: FitConfig | None = None,
    ) -> None:
        self._skills = skill_matcher or SkillMatcher()
        self._config = config or FitConfig()

    def score(
        self,
        candidate: CandidateProfile,
        job: JobProfile,
        registry: DomainRegistry | None,
    ) -> FitAssessment:
        gaps: list[DataGap] = []
        skill_match = self._skills.match(
            candidate.skills,
            job.must_have_skills,
            job.nice_to_have_skills,
            registry,
        )
        if not candidate.skills and job.must_have_skills:
            gaps.append(DataGap("skills", "Candidate lists no skills"))

        skills_score = self._skills_score(skill_match)
        experience_score, experience_gap = self._experience_score(candidate, job, gaps)
        seniority_score, distance = self._seniority_score(candidate, job, gaps)

        breakdown = {
            "skills": float(skills_score),
            "experience": float(experience_score),
            "seniority": float(seniority_score),
        }
        return FitAssessment(
            score=round_score(weighted_average(breakdown, self._config.weights)),
            skills=skills_score,
            experience=experience_score,
            seniority=seniority_score,
            skill_match=skill_match,
            seniority_distance=distance,
            experience_gap=experience_gap,
            gaps=gaps,
        )

    def _skills_score(self, skill_match: SkillMatch) -> int:
        base = 100.0 * skill_match.coverage
        bonus = 0.0
        if skill_match.nice_to_have_total:
            bonus = self._config.nice_to_have_bonus * (
                skill_match.nice_to_have_matched / skill_match.nice_to_have_total
            )
        return round_score(clamp(base + bonus))

    def _experience_score(
        self,
        candidate: CandidateProfile,
        job: JobProfile,
        gaps: list[DataGap],
    ) -> tuple[int, float | None]:
        if job.experience_min is None and job.experience_max is None:
            return 100, None
        if candidate.years_experience is None:
            gaps.append(DataGap("experience", "Years of experience unknown"))
            return NEUTRAL_SCORE, None

        years = candidate.years_experience
        lower = job.experience_min if job.experience_min is not None else 0.0
        upper = job.experience_max if job.experience_max is not None else float("inf")
        if lower <= years <= upper:
            return 100, 0.0
        if years < lower:
            gap = lower - years
            return round_score(100 - gap * self._config.under_experience_penalty), -gap
        gap = years - upper
        return round_score(100 - gap * self._config.over_experience_penalty), gap

    def _seniority_score(
        self,
        candidate: CandidateProfile,
        job: JobProfile,
        gaps: list[DataGap],
    ) -> tuple[int, int | None]:
        if job.seniority is None:
            return 100, None
        if candidate.seniority is None:
            gaps.append(DataGap("seniority", "Seniority level unknown"))
            return NEUTRAL_SCORE, None
        distance = seniority_distance(candidate.seniority, job.seniority)
        if distance is None:
            return NEUTRAL_SCORE, None
        return round_score(100 - distance * self._config.seniority_level_penalty), distance
