"""In-process entry points for single and batch evaluation."""

from __future__ import annotations

import threading
from datetime import date
from functools import lru_cache
from typing import Any, Mapping, Sequence, Union

from .core import BatchOrchestrator, DomainRegistry, MatchEngine, MatchMode, as_registry
from .core.batch import CommuteLookup, OverrideLookup
from .core.engine import RegistryInput
from .schemas import CandidateProfile, CommuteEstimate, CommuteOverride, JobProfile, MatchResult

ProfileInput = Union[CandidateProfile, JobProfile, Mapping[str, Any]]


@lru_cache(maxsize=1)
def default_registry() -> DomainRegistry:
    """Bundled domain registry, parsed once per process."""
    return DomainRegistry.default()


def _resolve_registry(domains: RegistryInput) -> DomainRegistry:
    registry = as_registry(domains)
    return registry if registry is not None else default_registry()


def _as_candidate(value: CandidateProfile | Mapping[str, Any]) -> CandidateProfile:
    return value if isinstance(value, CandidateProfile) else CandidateProfile.model_validate(value)


def _as_job(value: JobProfile | Mapping[str, Any]) -> JobProfile:
    return value if isinstance(value, JobProfile) else JobProfile.model_validate(value)


def evaluate(
    candidate: CandidateProfile | Mapping[str, Any],
    job: JobProfile | Mapping[str, Any],
    domains: RegistryInput = None,
    override: CommuteOverride | Mapping[str, Any] | None = None,
    *,
    commute: CommuteEstimate | float | None = None,
    as_of: date | None = None,
    mode: MatchMode = "exact",
    engine: MatchEngine | None = None,
) -> MatchResult:
    """Score one candidate against one job.

    ``domains`` may be a ``DomainRegistry`` snapshot or raw domain rows; the
    bundled registry is used when omitted. ``commute`` is an already resolved
    travel time, either a ``CommuteEstimate`` or plain minutes.
    """
    if override is not None and not isinstance(override, CommuteOverride):
        override = CommuteOverride.model_validate(override)
    if commute is not None and not isinstance(commute, CommuteEstimate):
        commute = CommuteEstimate(minutes=commute)
    return (engine or MatchEngine()).evaluate(
        _as_candidate(candidate),
        _as_job(job),
        _resolve_registry(domains),
        override=override,
        commute=commute,
        as_of=as_of,
        mode=mode,
    )


def evaluate_batch(
    subject: ProfileInput,
    counterparts: Sequence[ProfileInput],
    mode: MatchMode = "exact",
    *,
    domains: RegistryInput = None,
    commute_lookup: CommuteLookup | None = None,
    override_lookup: OverrideLookup | None = None,
    as_of: date | None = None,
    max_workers: int = BatchOrchestrator.DEFAULT_MAX_WORKERS,
    cancel_event: threading.Event | None = None,
    engine: MatchEngine | None = None,
) -> list[MatchResult]:
    """Rank jobs for a candidate, or candidates for a job.

    A mapping subject is treated as a candidate when it carries a
    ``candidate_id`` key and as a job otherwise.
    """
    if isinstance(subject, Mapping):
        subject = _as_candidate(subject) if "candidate_id" in subject else _as_job(subject)
    orchestrator = BatchOrchestrator(
        engine,
        max_workers=max_workers,
        registry_loader=default_registry,
        commute_lookup=commute_lookup,
        override_lookup=override_lookup,
        as_of=as_of,
    )
    return orchestrator.evaluate_batch(
        subject,
        counterparts,
        mode,
        registry=domains,
        cancel_event=cancel_event,
    )


__all__ = ["default_registry", "evaluate", "evaluate_batch"]
