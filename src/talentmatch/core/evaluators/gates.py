"\"\"\"Hard dealbreaker gates applied multiplicatively to the blended score.\"\"\""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from ...schemas import (
    LANGUAGE_LEVELS,
    CandidateProfile,
    Dealbreakers,
    DomainMismatch,
    HardKill,
    JobProfile,
)
from ...schemas.config import ConfigurationError
from ..registry import OTHER_DOMAIN, DomainDetection, DomainRegistry
from .constraints import resolve_availability
from .fit import seniority_distance


@dataclass
class GateConfig:
    """Thresholds and multipliers for dealbreaker gates."""

    salary_tolerance_percent: float = 10.0
    salary_tiers: list[tuple[float, float]] = None  # type: ignore[assignment]
    start_grace_days: int = 30
    start_tiers: list[tuple[float, float]] = None  # type: ignore[assignment]
    seniority_max_gap: int = 2
    seniority_multiplier: float = 0.4
    remote_candidate_onsite_job: float = 0.25
    onsite_candidate_remote_job: float = 0.5
    incompatible_domain_multiplier: float = 0.1
    domain_mismatch_multiplier: float = 0.6
    min_domain_confidence: float = 0.15
    hard_kills: dict[str, bool] = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.salary_tiers is None:
            self.salary_tiers = [(10.0, 0.5), (20.0, 0.3), (30.0, 0.15)]
        if self.start_tiers is None:
            self.start_tiers = [(0.0, 0.85), (30.0, 0.7), (60.0, 0.4)]
        self.salary_tiers = _validate_tiers(self.salary_tiers, "gates.salary_tiers")
        self.start_tiers = _validate_tiers(self.start_tiers, "gates.start_tiers")
        self.hard_kills = _validate_hard_kills(self.hard_kills)
        for name in (
            "seniority_multiplier",
            "remote_candidate_onsite_job",
            "onsite_candidate_remote_job",
            "incompatible_domain_multiplier",
            "domain_mismatch_multiplier",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0 <= value <= 1:
                raise ConfigurationError(f"gates.{name} must be a number in [0, 1], got {value!r}")


def _validate_tiers(tiers, section: str) -> list[tuple[float, float]]:
    validated: list[tuple[float, float]] = []
    for entry in tiers:
        try:
            threshold, multiplier = entry
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"{section}: expected [threshold, multiplier] pairs") from exc
        for value in (threshold, multiplier):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"{section}: non-numeric entry {entry!r}")
        if not 0 <= multiplier <= 1:
            raise ConfigurationError(f"{section}: multiplier {multiplier!r} outside [0, 1]")
        validated.append((float(threshold), float(multiplier)))
    return sorted(validated)


HARD_KILL_RULES: tuple[str, ...] = ("visa", "language", "onsite", "license")


def _validate_hard_kills(flags) -> dict[str, bool]:
    enabled = {rule: True for rule in HARD_KILL_RULES}
    if flags is None:
        return enabled
    if not isinstance(flags, dict):
        raise ConfigurationError(f"gates.hard_kills must be a mapping, got {flags!r}")
    for rule, value in flags.items():
        if rule not in enabled:
            raise ConfigurationError(f"gates.hard_kills: unknown rule {rule!r}")
        if not isinstance(value, bool):
            raise ConfigurationError(f"gates.hard_kills.{rule} must be true or false, got {value!r}")
        enabled[rule] = value
    return enabled


def _tier_multiplier(tiers: list[tuple[float, float]], value: float) -> float:
    multiplier = 1.0
    for threshold, tier_multiplier in tiers:
        if value >= threshold:
            multiplier = tier_multiplier
    return multiplier


@dataclass(frozen=True, slots=True)
class GateTrigger:
    """A fired dealbreaker with a short human-readable cause."""

    dimension: str
    multiplier: float
    message: str


@dataclass(slots=True)
class GateAssessment:
    dealbreakers: Dealbreakers
    multiplier: float
    domain_mismatch: DomainMismatch | None = None
    hard_kill: HardKill | None = None
    candidate_domain: DomainDetection | None = None
    job_domain: DomainDetection | None = None
    triggers: list[GateTrigger] = field(default_factory=list)

    @property
    def is_incompatible(self) -> bool:
        return bool(self.domain_mismatch and self.domain_mismatch.is_incompatible)

    @property
    def is_killed(self) -> bool:
        return self.hard_kill is not None

    def most_decisive(self) -> GateTrigger | None:
        if not self.triggers:
            return None
        return min(self.triggers, key=lambda trigger: trigger.multiplier)


class GateEvaluator:
    """Evaluate hard dealbreakers for a candidate/job pair."""

    method = "gates"

    def __init__(self, *, config: GateConfig | None = None) -> None:
        self._config = config or GateConfig()

    def evaluate(
        self,
        candidate: CandidateProfile,
        job: JobProfile,
        registry: DomainRegistry | None,
        *,
        as_of: date | None = None,
    ) -> GateAssessment:
        triggers: list[GateTrigger] = []
        salary = self._salary_gate(candidate, job, triggers)
        start_date = self._start_date_gate(candidate, job, as_of, triggers)
        seniority = self._seniority_gate(candidate, job, triggers)
        work_model = self._work_model_gate(candidate, job, triggers)

        tech_domain = 1.0
        mismatch: DomainMismatch | None = None
        candidate_domain: DomainDetection | None = None
        job_domain: DomainDetection | None = None
        if registry is not None:
            candidate_domain = self._detect_candidate(candidate, registry)
            job_domain = self._detect_job(job, registry)
            tech_domain, mismatch = self._domain_gate(candidate_domain, job_domain, registry, triggers)

        dealbreakers = Dealbreakers(
            salary=salary,
            start_date=start_date,
            seniority=seniority,
            work_model=work_model,
            tech_domain=tech_domain,
        )
        multiplier = min(max(dealbreakers.product(), 0.0), 1.0)
        hard_kill = self._hard_kill(candidate, job)
        if hard_kill is not None:
            multiplier = 0.0
            triggers.insert(0, GateTrigger("hard_kill", 0.0, hard_kill.reason))
        return GateAssessment(
            dealbreakers=dealbreakers,
            multiplier=multiplier,
            domain_mismatch=mismatch,
            hard_kill=hard_kill,
            candidate_domain=candidate_domain,
            job_domain=job_domain,
            triggers=triggers,
        )

    def _salary_gate(self, candidate: CandidateProfile, job: JobProfile, triggers: list[GateTrigger]) -> float:
        if candidate.salary is None or candidate.salary.is_empty or not job.salary_max:
            return 1.0
        minimum = candidate.salary.acceptable_minimum
        gap_percent = (minimum - job.salary_max) / job.salary_max * 100
        if gap_percent <= self._config.salary_tolerance_percent:
            return 1.0
        multiplier = _tier_multiplier(self._config.salary_tiers, gap_percent)
        if multiplier < 1.0:
            triggers.append(
                GateTrigger("salary", multiplier, f"Salary minimum {gap_percent:.0f}% above budget")
            )
        return multiplier

    def _start_date_gate(
        self,
        candidate: CandidateProfile,
        job: JobProfile,
        as_of: date | None,
        triggers: list[GateTrigger],
    ) -> float:
        availability = resolve_availability(candidate, as_of)
        if availability is None or job.start_by is None:
            return 1.0
        overshoot = (availability - job.start_by).days - self._config.start_grace_days
        if overshoot <= 0:
            return 1.0
        multiplier = _tier_multiplier(self._config.start_tiers, overshoot)
        if multiplier < 1.0:
            triggers.append(
                GateTrigger(
                    "start_date",
                    multiplier,
                    f"Available {overshoot} days after the start window",
                )
            )
        return multiplier

    def _seniority_gate(self, candidate: CandidateProfile, job: JobProfile, triggers: list[GateTrigger]) -> float:
        distance = seniority_distance(candidate.seniority, job.seniority)
        if distance is None or distance <= self._config.seniority_max_gap:
            return 1.0
        multiplier = self._config.seniority_multiplier
        triggers.append(
            GateTrigger(
                "seniority",
                multiplier,
                f"Seniority {candidate.seniority} vs required {job.seniority} ({distance} levels apart)",
            )
        )
        return multiplier

    def _work_model_gate(self, candidate: CandidateProfile, job: JobProfile, triggers: list[GateTrigger]) -> float:
        wanted = candidate.work_model
        offered = job.effective_work_model
        if wanted == "remote" and offered == "onsite":
            multiplier = self._config.remote_candidate_onsite_job
            triggers.append(GateTrigger("work_model", multiplier, "Candidate is remote-only, role is onsite"))
            return multiplier
        if wanted == "onsite" and offered == "remote":
            multiplier = self._config.onsite_candidate_remote_job
            triggers.append(GateTrigger("work_model", multiplier, "Candidate wants onsite, role is remote-only"))
            return multiplier
        return 1.0

    def _hard_kill(self, candidate: CandidateProfile, job: JobProfile) -> HardKill | None:
        """First exclusion rule that fires, checked in visa/language/onsite/license order."""
        enabled = self._config.hard_kills
        if enabled["visa"] and candidate.visa_required and not job.visa_sponsorship:
            return HardKill(category="visa", reason="Work visa required, role offers no sponsorship")

        if enabled["language"]:
            spoken = {item.language: item.level for item in candidate.languages}
            for requirement in job.required_languages:
                if requirement.language not in spoken:
                    return HardKill(category="language", reason=f"Language {requirement.language} missing")
                if requirement.min_level is None:
                    continue
                level = spoken[requirement.language] or LANGUAGE_LEVELS[0]
                if LANGUAGE_LEVELS.index(level) < LANGUAGE_LEVELS.index(requirement.min_level):
                    return HardKill(
                        category="language",
                        reason=f"Language {requirement.language} requires at least {requirement.min_level.upper()}",
                    )

        if enabled["onsite"] and job.onsite_required and candidate.work_model == "remote":
            return HardKill(category="onsite", reason="Role requires onsite presence, candidate is remote-only")

        if enabled["license"]:
            held = [cert.lower() for cert in candidate.certifications]
            for required in job.required_certifications:
                wanted = required.lower()
                if not any(wanted in cert or cert in wanted for cert in held):
                    return HardKill(category="license", reason=f"Certification {required} missing")
        return None

    @staticmethod
    def _detect_candidate(candidate: CandidateProfile, registry: DomainRegistry) -> DomainDetection:
        if candidate.domain and candidate.domain in registry:
            return DomainDetection(candidate.domain.strip().lower(), None, 1.0, explicit=True)
        return registry.detect(candidate.skills, candidate.current_title)

    @staticmethod
    def _detect_job(job: JobProfile, registry: DomainRegistry) -> DomainDetection:
        if job.domain and job.domain in registry:
            return DomainDetection(job.domain.strip().lower(), None, 1.0, explicit=True)
        return registry.detect([*job.must_have_skills, *job.nice_to_have_skills], job.title)

    def _domain_gate(
        self,
        candidate_domain: DomainDetection,
        job_domain: DomainDetection,
        registry: DomainRegistry,
        triggers: list[GateTrigger],
    ) -> tuple[float, DomainMismatch | None]:
        threshold = self._config.min_domain_confidence
        if (
            OTHER_DOMAIN in (candidate_domain.primary, job_domain.primary)
            or candidate_domain.confidence < threshold
            or job_domain.confidence < threshold
            or candidate_domain.primary == job_domain.primary
        ):
            return 1.0, None

        mismatch_names = {
            "candidate_domain": registry.display_name(candidate_domain.primary),
            "job_domain": registry.display_name(job_domain.primary),
        }
        if registry.is_incompatible(candidate_domain.primary, job_domain.primary):
            multiplier = self._config.incompatible_domain_multiplier
            triggers.append(
                GateTrigger(
                    "tech_domain",
                    multiplier,
                    f"Incompatible domains: {mismatch_names['candidate_domain']} vs {mismatch_names['job_domain']}",
                )
            )
            return multiplier, DomainMismatch(is_incompatible=True, **mismatch_names)

        if registry.is_transferable(candidate_domain.primary, job_domain.primary) or registry.is_transferable(
            job_domain.primary, candidate_domain.primary
        ):
            return 1.0, None

        multiplier = self._config.domain_mismatch_multiplier
        triggers.append(
            GateTrigger(
                "tech_domain",
                multiplier,
                f"Different domain: {mismatch_names['candidate_domain']} vs {mismatch_names['job_domain']}",
            )
        )
        return multiplier, DomainMismatch(is_incompatible=False, **mismatch_names)
