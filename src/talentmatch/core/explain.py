"""Reasons, risks and next actions derived from computed scoring data.

Every statement here is read off the fit, constraint and gate assessments of
the same evaluation; nothing is re-scored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from ..schemas import (
    BasicExplainability,
    CandidateProfile,
    EnhancedExplainability,
    EnhancedReason,
    EnhancedRisk,
    JobProfile,
    PolicyTier,
    RecruiterAction,
)
from .evaluators.base import NEUTRAL_SCORE
from .evaluators.constraints import ConstraintAssessment
from .evaluators.fit import FitAssessment
from .evaluators.gates import GateAssessment

ExplainVariant = Literal["basic", "enhanced"]

_NEXT_ACTIONS: dict[str, str] = {
    "hot": "Invite to interview immediately",
    "standard": "Contact candidate and clarify details",
    "maybe": "Review manually if needed",
    "hidden": "Do not show",
}


@dataclass
class ExplainConfig:
    """Limits for generated explanations."""

    top_n: int = 3
    enhanced_n: int = 5
    max_steps: int = 4
    low_coverage: float = 0.7


@dataclass(slots=True)
class _Draft:
    reasons: list[EnhancedReason] = field(default_factory=list)
    risks: list[EnhancedRisk] = field(default_factory=list)
    talking_points: list[str] = field(default_factory=list)


def _join(items: list[str], limit: int) -> str:
    return ", ".join(items[:limit])


class ExplainabilityGenerator:
    """Build basic or enhanced explanations for a scored pair."""

    def __init__(self, *, config: ExplainConfig | None = None) -> None:
        self._config = config or ExplainConfig()

    def generate(
        self,
        *,
        candidate: CandidateProfile,
        job: JobProfile,
        fit: FitAssessment,
        constraints: ConstraintAssessment,
        gates: GateAssessment,
        policy: PolicyTier,
        overall: int,
        hidden_threshold: float,
        notes: list[str] | None = None,
        variant: ExplainVariant = "enhanced",
    ) -> BasicExplainability | EnhancedExplainability:
        notes = list(notes or [])
        draft = _Draft()
        self._skill_reasons(fit, draft)
        self._experience_reasons(candidate, fit, draft)
        self._constraint_reasons(constraints, draft)
        self._domain_reasons(gates, draft)

        self._domain_risks(gates, draft)
        self._hard_kill_risks(gates, draft)
        self._note_risks(notes, draft)
        self._skill_risks(fit, draft)
        self._gate_risks(gates, constraints, draft)
        self._commute_risks(constraints, draft)
        self._data_risks(fit, constraints, draft)

        why_not = self._why_not(policy, overall, fit, gates, hidden_threshold)
        basic = {
            "top_reasons": [reason.text for reason in draft.reasons[: self._config.top_n]],
            "top_risks": [risk.text for risk in draft.risks[: self._config.top_n]],
            "next_action": _NEXT_ACTIONS[policy],
            "why_not": why_not,
            "notes": [*notes, *(f"Missing data: {gap.message}" for gap in [*fit.gaps, *constraints.gaps])],
        }
        if variant == "basic":
            return BasicExplainability(**basic)
        return EnhancedExplainability(
            **basic,
            enhanced_reasons=draft.reasons[: self._config.enhanced_n],
            enhanced_risks=draft.risks[: self._config.enhanced_n],
            recruiter_action=self._recruiter_action(policy, fit, gates, draft),
        )

    def _skill_reasons(self, fit: FitAssessment, draft: _Draft) -> None:
        matched = fit.skill_match.matched
        if matched:
            count = len(matched)
            impact = "high" if count >= 5 else "medium" if count >= 3 else "low"
            draft.reasons.append(
                EnhancedReason(
                    text=f"{count} direct skill matches: {_join(matched, 3)}",
                    impact=impact,
                    category="skills",
                )
            )
            draft.talking_points.append(f"Highlight experience with {' and '.join(matched[:2])}")
        transferable = fit.skill_match.transferable_names
        if transferable:
            draft.reasons.append(
                EnhancedReason(
                    text=f"{len(transferable)} transferable skills: {_join(transferable, 3)}",
                    impact="medium",
                    category="skills",
                )
            )

    @staticmethod
    def _experience_reasons(candidate: CandidateProfile, fit: FitAssessment, draft: _Draft) -> None:
        if candidate.years_experience is None:
            return
        years = f"{candidate.years_experience:g}"
        if fit.experience >= 80:
            draft.reasons.append(
                EnhancedReason(text=f"Experience fits: {years} years", impact="high", category="experience")
            )
        elif fit.experience >= 60:
            draft.reasons.append(
                EnhancedReason(
                    text=f"{years} years of experience (sufficient)",
                    impact="medium",
                    category="experience",
                )
            )

    @staticmethod
    def _constraint_reasons(constraints: ConstraintAssessment, draft: _Draft) -> None:
        if constraints.salary_gap_percent is not None:
            if constraints.salary >= 80:
                draft.reasons.append(
                    EnhancedReason(text="Salary expectation within budget", impact="high", category="salary")
                )
            elif constraints.salary >= 60:
                draft.reasons.append(
                    EnhancedReason(text="Salary negotiable within budget", impact="medium", category="salary")
                )
                draft.talking_points.append("Clarify salary range and flexibility")
        if constraints.start_delay_days is not None:
            if constraints.start_date >= 90:
                draft.reasons.append(
                    EnhancedReason(text="Can start in time", impact="high", category="availability")
                )
            elif constraints.start_date >= 70:
                draft.reasons.append(
                    EnhancedReason(text="Start date close to schedule", impact="medium", category="availability")
                )
        if constraints.override_applied:
            draft.reasons.append(
                EnhancedReason(text="Candidate accepted the longer commute", impact="medium", category="location")
            )
        elif constraints.commute >= 80 and constraints.commute != NEUTRAL_SCORE:
            draft.reasons.append(
                EnhancedReason(text="Location or remote preference fits", impact="medium", category="location")
            )

    @staticmethod
    def _domain_reasons(gates: GateAssessment, draft: _Draft) -> None:
        cand, job = gates.candidate_domain, gates.job_domain
        if cand is None or job is None or gates.domain_mismatch is not None:
            return
        if cand.is_confident and cand.primary == job.primary:
            draft.reasons.append(
                EnhancedReason(text=f"Same domain: {cand.primary}", impact="medium", category="domain")
            )

    @staticmethod
    def _domain_risks(gates: GateAssessment, draft: _Draft) -> None:
        mismatch = gates.domain_mismatch
        if mismatch is None:
            return
        if mismatch.is_incompatible:
            draft.risks.insert(
                0,
                EnhancedRisk(
                    text=f"Technology mismatch: {mismatch.candidate_domain} -> {mismatch.job_domain}",
                    severity="critical",
                    mitigatable=False,
                    category="domain",
                ),
            )
            return
        draft.risks.append(
            EnhancedRisk(
                text=f"Different domain: {mismatch.candidate_domain} -> {mismatch.job_domain}",
                severity="warning",
                mitigatable=True,
                mitigation="Clarify motivation for the domain switch in the interview",
                category="domain",
            )
        )
        draft.talking_points.append("Ask about the motivation for changing domains")

    @staticmethod
    def _hard_kill_risks(gates: GateAssessment, draft: _Draft) -> None:
        if gates.hard_kill is None:
            return
        draft.risks.insert(
            0,
            EnhancedRisk(
                text=gates.hard_kill.reason,
                severity="critical",
                mitigatable=False,
                category="eligibility",
            ),
        )

    @staticmethod
    def _note_risks(notes: list[str], draft: _Draft) -> None:
        for note in notes:
            draft.risks.append(EnhancedRisk(text=note, severity="info", mitigatable=False, category="data"))

    @staticmethod
    def _skill_risks(fit: FitAssessment, draft: _Draft) -> None:
        missing = fit.skill_match.must_have_missing
        if not missing:
            return
        has_transferable = bool(fit.skill_match.transferable)
        mitigatable = has_transferable or len(missing) <= 2
        mitigation = None
        if has_transferable:
            mitigation = "Transferable skills present, onboarding is feasible"
        elif len(missing) <= 2:
            mitigation = "Skills can be learned on the job"
        draft.risks.append(
            EnhancedRisk(
                text=f"Missing must-haves: {_join(missing, 2)}",
                severity="critical" if len(missing) >= 3 else "warning",
                mitigatable=mitigatable,
                mitigation=mitigation,
                category="skills",
            )
        )
        if len(missing) <= 2:
            draft.talking_points.append(f"Discuss ramp-up on {missing[0]}")

    @staticmethod
    def _gate_risks(gates: GateAssessment, constraints: ConstraintAssessment, draft: _Draft) -> None:
        factors = gates.dealbreakers
        messages = {trigger.dimension: trigger.message for trigger in gates.triggers}
        gap = constraints.salary_gap_percent
        if factors.salary < 1:
            draft.risks.append(
                EnhancedRisk(
                    text=messages.get("salary", "Salary over budget"),
                    severity="critical" if factors.salary <= 0.3 else "warning",
                    mitigatable=factors.salary > 0.3,
                    mitigation="Offer a staged raise or benefits package" if factors.salary > 0.3 else None,
                    category="salary",
                )
            )
        elif gap is not None and gap > 0:
            draft.risks.append(
                EnhancedRisk(
                    text=f"Salary expectation {gap:.0f}% above budget",
                    severity="info",
                    mitigatable=True,
                    mitigation="Present the total package including benefits",
                    category="salary",
                )
            )
            draft.talking_points.append("Discuss the total package including benefits")
        if factors.start_date < 1:
            draft.risks.append(
                EnhancedRisk(
                    text=messages.get("start_date", "Start date later than required"),
                    severity="info",
                    mitigatable=True,
                    mitigation="Check notice period and early release options",
                    category="timing",
                )
            )
        if factors.seniority < 1:
            draft.risks.append(
                EnhancedRisk(
                    text=messages.get("seniority", "Seniority level differs"),
                    severity="warning",
                    mitigatable=True,
                    mitigation="Emphasize growth path and scope of the role",
                    category="seniority",
                )
            )
        if factors.work_model < 1:
            draft.risks.append(
                EnhancedRisk(
                    text=messages.get("work_model", "Work model mismatch"),
                    severity="warning",
                    mitigatable=True,
                    mitigation="Explore a hybrid arrangement",
                    category="location",
                )
            )

    @staticmethod
    def _commute_risks(constraints: ConstraintAssessment, draft: _Draft) -> None:
        if constraints.override_response == "no":
            draft.risks.append(
                EnhancedRisk(
                    text="Candidate declined this commute",
                    severity="warning",
                    mitigatable=False,
                    category="location",
                )
            )
        elif constraints.override_response == "conditional":
            draft.risks.append(
                EnhancedRisk(
                    text="Commute accepted only conditionally",
                    severity="info",
                    mitigatable=True,
                    mitigation="Clarify the candidate's conditions",
                    category="location",
                )
            )
        if constraints.override_applied or not constraints.commute_overrun_percent:
            return
        draft.risks.append(
            EnhancedRisk(
                text=(
                    f"Commute {constraints.commute_minutes:.0f} min exceeds preference of "
                    f"{constraints.commute_limit_minutes} min"
                ),
                severity="warning" if constraints.commute < 60 else "info",
                mitigatable=True,
                mitigation="Ask the candidate to confirm the commute",
                category="location",
            )
        )

    @staticmethod
    def _data_risks(
        fit: FitAssessment,
        constraints: ConstraintAssessment,
        draft: _Draft,
    ) -> None:
        for gap in [*fit.gaps, *constraints.gaps]:
            draft.risks.append(
                EnhancedRisk(
                    text=f"Missing data: {gap.message}",
                    severity="info",
                    mitigatable=True,
                    mitigation="Ask the candidate to complete the profile",
                    category="data",
                )
            )

    def _why_not(
        self,
        policy: PolicyTier,
        overall: int,
        fit: FitAssessment,
        gates: GateAssessment,
        hidden_threshold: float,
    ) -> str | None:
        if policy != "hidden":
            return None
        if gates.hard_kill is not None:
            return gates.hard_kill.reason
        if gates.is_incompatible:
            mismatch = gates.domain_mismatch
            return f"Incompatible domains: {mismatch.candidate_domain} vs {mismatch.job_domain}"
        decisive = gates.most_decisive()
        if decisive is not None and decisive.multiplier <= 0.5:
            return decisive.message
        coverage = fit.skill_match.coverage
        if coverage < self._config.low_coverage:
            return f"Must-have coverage only {round(coverage * 100)}%"
        if decisive is not None:
            return decisive.message
        return f"Score {overall} below the minimum of {hidden_threshold:g}"

    def _recruiter_action(
        self,
        policy: PolicyTier,
        fit: FitAssessment,
        gates: GateAssessment,
        draft: _Draft,
    ) -> RecruiterAction:
        matched = fit.skill_match.matched
        missing = fit.skill_match.must_have_missing
        steps: list[str] = []
        talking_points = list(draft.talking_points)
        if policy == "hot":
            recommendation, priority = "proceed", "high"
            steps.extend(["Contact within 24 hours", "Propose interview slots"])
            if matched:
                steps.append(f"Lead with strengths: {_join(matched, 2)}")
            talking_points.extend(
                ["Ask about current situation and motivation", "Confirm salary and availability"]
            )
        elif policy == "standard":
            recommendation, priority = "proceed", "medium"
            steps.append("Review the profile in detail")
            if missing:
                steps.append(f"Clarify skill gaps: {_join(missing, 2)}")
            if gates.dealbreakers.salary < 1:
                steps.append("Clarify salary range up front")
            steps.append("Invite to interview if the impression is positive")
        elif policy == "maybe":
            recommendation, priority = "review", "low"
            steps.extend(["Consider only when the pipeline is thin", "Check alternative jobs for the candidate"])
        else:
            recommendation, priority = "skip", "low"
            steps.append("Check alternative jobs for the candidate")
        return RecruiterAction(
            recommendation=recommendation,
            priority=priority,
            next_steps=steps[: self._config.max_steps],
            talking_points=talking_points[: self._config.max_steps],
        )
