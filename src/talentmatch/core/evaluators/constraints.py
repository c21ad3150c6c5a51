"\"\"\"Constraint scoring: salary overlap, commute and start date.\"\"\""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta

from ...schemas import CandidateProfile, CommuteEstimate, CommuteOverride, JobProfile
from ...schemas.config import require_weights
from .base import NEUTRAL_SCORE, DataGap, round_score, weighted_average


@dataclass
class ConstraintConfig:
    """Weights and decay rates for constraint scoring."""

    weights: dict[str, float] = None  # type: ignore[assignment]
    salary_decay_per_percent: float = 3.0
    commute_decay_per_percent: float = 2.0
    default_max_commute_minutes: int = 45
    full_week_days: int = 5
    start_date_decay_per_day: float = 0.5

    def __post_init__(self) -> None:
        if self.weights is None:
            self.weights = {"salary": 1.0, "commute": 1.0, "start_date": 1.0}
        self.weights = require_weights(self.weights, section="constraints.weights")


@dataclass(slots=True)
class ConstraintAssessment:
    """Constraint score with the intermediate values it was built from."""

    score: int
    salary: int
    commute: int
    start_date: int
    salary_gap_percent: float | None = None
    commute_minutes: float | None = None
    commute_limit_minutes: int | None = None
    commute_overrun_percent: float | None = None
    override_applied: bool = False
    override_response: str | None = None
    availability: date | None = None
    start_delay_days: int | None = None
    gaps: list[DataGap] = field(default_factory=list)


def resolve_availability(candidate: CandidateProfile, as_of: date | None) -> date | None:
    """Earliest start date from an explicit date or a notice period."""
    if candidate.available_from is not None:
        return candidate.available_from
    if candidate.notice_period_days is not None and as_of is not None:
        return as_of + timedelta(days=candidate.notice_period_days)
    return None


def override_for(
    override: CommuteOverride | None,
    candidate: CandidateProfile,
    job: JobProfile,
) -> CommuteOverride | None:
    """Return the override only when it was recorded for this exact pair."""
    if override is None:
        return None
    if override.candidate_id != candidate.candidate_id or override.job_id != job.job_id:
        return None
    return override


class ConstraintScorer:
    """Score salary, commute and start-date feasibility on a 0-100 scale."""

    method = "constraints"

    def __init__(self, *, config: ConstraintConfig | None = None) -> None:
        self._config = config or ConstraintConfig()

    def score(
        self,
        candidate: CandidateProfile,
        job: JobProfile,
        *,
        commute: CommuteEstimate | None = None,
        override: CommuteOverride | None = None,
        as_of: date | None = None,
    ) -> ConstraintAssessment:
        gaps: list[DataGap] = []
        salary, salary_gap = self._salary_score(candidate, job, gaps)
        assessment = ConstraintAssessment(
            score=0,
            salary=salary,
            commute=0,
            start_date=0,
            salary_gap_percent=salary_gap,
            gaps=gaps,
        )
        self._commute_score(candidate, job, commute, override_for(override, candidate, job), assessment)
        self._start_date_score(candidate, job, as_of, assessment)

        breakdown = {
            "salary": float(assessment.salary),
            "commute": float(assessment.commute),
            "start_date": float(assessment.start_date),
        }
        assessment.score = round_score(weighted_average(breakdown, self._config.weights))
        return assessment

    def _salary_score(
        self,
        candidate: CandidateProfile,
        job: JobProfile,
        gaps: list[DataGap],
    ) -> tuple[int, float | None]:
        if job.salary_max is None or job.salary_max <= 0:
            return 100, None
        if candidate.salary is None or candidate.salary.is_empty:
            gaps.append(DataGap("salary", "Salary expectation unknown"))
            return NEUTRAL_SCORE, None

        minimum = candidate.salary.acceptable_minimum
        expectation = candidate.salary.expectation
        if minimum <= job.salary_max and expectation <= job.salary_max:
            return 100, 0.0
        reference = max(minimum, expectation)
        gap_percent = (reference - job.salary_max) / job.salary_max * 100
        return round_score(100 - gap_percent * self._config.salary_decay_per_percent), gap_percent

    def _commute_score(
        self,
        candidate: CandidateProfile,
        job: JobProfile,
        commute: CommuteEstimate | None,
        override: CommuteOverride | None,
        assessment: ConstraintAssessment,
    ) -> None:
        if override is not None:
            assessment.override_response = override.response
        limit = candidate.commute.max_minutes
        if limit is None:
            limit = self._config.default_max_commute_minutes
        assessment.commute_limit_minutes = limit
        if commute is not None:
            assessment.commute_minutes = commute.minutes

        if job.is_remote:
            assessment.commute = 100
            return
        if override is not None and override.is_accepted:
            assessment.override_applied = True
            assessment.commute = 100
            return
        if commute is None:
            assessment.gaps.append(DataGap("commute", "Travel time unknown"))
            assessment.commute = NEUTRAL_SCORE
            return
        if commute.minutes <= limit:
            assessment.commute = 100
            assessment.commute_overrun_percent = 0.0
            return

        if limit <= 0:
            assessment.commute_overrun_percent = float("inf")
            assessment.commute = 0
            return

        overrun = (commute.minutes - limit) / limit * 100
        assessment.commute_overrun_percent = overrun
        assessment.commute = round_score(
            100 - overrun * self._config.commute_decay_per_percent * self._onsite_share(job)
        )

    def _onsite_share(self, job: JobProfile) -> float:
        if job.work_model != "hybrid" or job.onsite_days_per_week is None:
            return 1.0
        return min(job.onsite_days_per_week, self._config.full_week_days) / self._config.full_week_days

    def _start_date_score(
        self,
        candidate: CandidateProfile,
        job: JobProfile,
        as_of: date | None,
        assessment: ConstraintAssessment,
    ) -> None:
        availability = resolve_availability(candidate, as_of)
        assessment.availability = availability
        if job.start_by is None:
            assessment.start_date = 100
            return
        if availability is None:
            assessment.gaps.append(DataGap("start_date", "Availability date unknown"))
            assessment.start_date = NEUTRAL_SCORE
            return
        delay = (availability - job.start_by).days
        assessment.start_delay_days = max(delay, 0)
        if delay <= 0:
            assessment.start_date = 100
            return
        assessment.start_date = round_score(100 - delay * self._config.start_date_decay_per_day)
