"\"\"\"Single-pair match evaluation.\"\"\""

from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional, Union

import structlog

from ..schemas import (
    CandidateProfile,
    CommuteEstimate,
    CommuteOverride,
    ConstraintBreakdown,
    ConstraintScore,
    FitBreakdown,
    FitDetails,
    FitScore,
    Gates,
    JobProfile,
    MatchResult,
    SkillDetails,
    TechDomain,
)
from ..schemas.config import ConfigurationError, require_weights
from .evaluators.base import round_score, weighted_average
from .evaluators.constraints import ConstraintScorer
from .evaluators.fit import FitScorer
from .evaluators.gates import GateEvaluator
from .explain import ExplainabilityGenerator, ExplainVariant
from .policy import MatchMode, PolicyClassifier
from .registry import DomainRegistry

RESULT_VERSION = "v3.1"

RegistryInput = Optional[Union[DomainRegistry, Iterable[Union[TechDomain, Mapping]]]]


def as_registry(domains: RegistryInput) -> DomainRegistry | None:
    """Accept a registry snapshot or raw domain rows."""
    if domains is None or isinstance(domains, DomainRegistry):
        return domains
    return DomainRegistry(domains)


class MatchEngine:
    """Coordinates the scorers, gates and policy for one candidate/job pair."""

    DEFAULT_BLEND_WEIGHTS: dict[str, float] = {"fit": 0.70, "constraints": 0.30}

    def __init__(
        self,
        *,
        fit_scorer: FitScorer | None = None,
        constraint_scorer: ConstraintScorer | None = None,
        gate_evaluator: GateEvaluator | None = None,
        policy: PolicyClassifier | None = None,
        explainer: ExplainabilityGenerator | None = None,
        blend_weights: Mapping[str, float] | None = None,
        explain: ExplainVariant = "enhanced",
    ) -> None:
        self._fit = fit_scorer or FitScorer()
        self._constraints = constraint_scorer or ConstraintScorer()
        self._gates = gate_evaluator or GateEvaluator()
        self._policy = policy or PolicyClassifier()
        self._explainer = explainer or ExplainabilityGenerator()
        self._blend_weights = require_weights(
            dict(blend_weights or self.DEFAULT_BLEND_WEIGHTS), section="core.blend_weights"
        )
        if explain not in ("basic", "enhanced"):
            raise ConfigurationError(f"explain must be 'basic' or 'enhanced', got {explain!r}")
        self._explain = explain
        self._logger = structlog.get_logger(__name__)

    @property
    def policy(self) -> PolicyClassifier:
        return self._policy

    def evaluate(
        self,
        candidate: CandidateProfile,
        job: JobProfile,
        registry: DomainRegistry | None = None,
        *,
        override: CommuteOverride | None = None,
        commute: CommuteEstimate | None = None,
        as_of: date | None = None,
        mode: MatchMode = "exact",
        notes: Iterable[str] = (),
    ) -> MatchResult:
        notes = list(notes)
        pair_registry = self._registry_for_pair(candidate, job, registry, notes)

        fit = self._fit.score(candidate, job, pair_registry)
        constraints = self._constraints.score(
            candidate, job, commute=commute, override=override, as_of=as_of
        )
        gates = self._gates.evaluate(candidate, job, pair_registry, as_of=as_of)

        blended = round_score(
            weighted_average(
                {"fit": float(fit.score), "constraints": float(constraints.score)},
                self._blend_weights,
            )
        )
        overall = round_score(blended * gates.multiplier)
        policy = self._policy.classify(
            overall,
            is_incompatible=gates.is_incompatible,
            is_killed=gates.is_killed,
            mode=mode,
        )
        explainability = self._explainer.generate(
            candidate=candidate,
            job=job,
            fit=fit,
            constraints=constraints,
            gates=gates,
            policy=policy,
            overall=overall,
            hidden_threshold=self._policy.threshold("maybe", mode=mode),
            notes=notes,
            variant=self._explain,
        )

        skill_match = fit.skill_match
        result = MatchResult(
            candidate_id=candidate.candidate_id,
            job_id=job.job_id,
            version=RESULT_VERSION,
            overall=overall,
            fit=FitScore(
                score=fit.score,
                breakdown=FitBreakdown(
                    skills=fit.skills,
                    experience=fit.experience,
                    seniority=fit.seniority,
                ),
                details=FitDetails(
                    skills=SkillDetails(
                        matched=skill_match.matched,
                        transferable=skill_match.transferable_names,
                        missing=skill_match.missing,
                        must_have_missing=skill_match.must_have_missing,
                    )
                ),
            ),
            constraints=ConstraintScore(
                score=constraints.score,
                breakdown=ConstraintBreakdown(
                    salary=constraints.salary,
                    commute=constraints.commute,
                    start_date=constraints.start_date,
                ),
            ),
            gate_multiplier=round(gates.multiplier, 6),
            gates=Gates(
                dealbreakers=gates.dealbreakers,
                domain_mismatch=gates.domain_mismatch,
                hard_kill=gates.hard_kill,
            ),
            must_have_coverage=round(skill_match.coverage, 6),
            policy=policy,
            explainability=explainability,
        )
        self._logger.debug(
            "match.evaluated",
            candidate_id=result.candidate_id,
            job_id=result.job_id,
            overall=result.overall,
            policy=result.policy,
            gate_multiplier=result.gate_multiplier,
        )
        return result

    @staticmethod
    def _registry_for_pair(
        candidate: CandidateProfile,
        job: JobProfile,
        registry: DomainRegistry | None,
        notes: list[str],
    ) -> DomainRegistry | None:
        if registry is None:
            return None
        unknown = [
            f"{owner} domain '{key}'"
            for owner, key in (("candidate", candidate.domain), ("job", job.domain))
            if key and key not in registry
        ]
        if not unknown:
            return registry
        notes.append(f"Unknown {' and '.join(unknown)}; domain rules skipped")
        return None
