"\"\"\"Concurrent evaluation of one subject against many counterparts.\"\"\""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date
from typing import Callable, Optional, Sequence, Union

import structlog

from ..schemas import CandidateProfile, CommuteEstimate, CommuteOverride, JobProfile, MatchResult
from .engine import MatchEngine, RegistryInput, as_registry
from .policy import MatchMode
from .registry import DomainRegistry

CommuteLookup = Callable[[CandidateProfile, JobProfile], Optional[CommuteEstimate]]
OverrideLookup = Callable[[str, str], Optional[CommuteOverride]]
Profile = Union[CandidateProfile, JobProfile]

CANCELLED_NOTE = "Evaluation cancelled; scored without external lookups"


def relevance_key(result: MatchResult, *, by: str) -> tuple:
    """Tier rank desc, overall desc, counterpart identifier asc."""
    identifier = result.job_id if by == "job" else result.candidate_id
    return (-result.tier_rank, -result.overall, identifier)


class BatchOrchestrator:
    """Fan pair evaluations out over a bounded thread pool and rank the results."""

    DEFAULT_MAX_WORKERS = 8

    def __init__(
        self,
        engine: MatchEngine | None = None,
        *,
        max_workers: int = DEFAULT_MAX_WORKERS,
        registry_loader: Callable[[], DomainRegistry] | None = None,
        commute_lookup: CommuteLookup | None = None,
        override_lookup: OverrideLookup | None = None,
        as_of: date | None = None,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._engine = engine or MatchEngine()
        self._max_workers = max_workers
        self._registry_loader = registry_loader or DomainRegistry.default
        self._commute_lookup = commute_lookup
        self._override_lookup = override_lookup
        self._as_of = as_of
        self._logger = structlog.get_logger(__name__)

    def evaluate_batch(
        self,
        subject: Profile,
        counterparts: Sequence[Profile],
        mode: MatchMode = "exact",
        *,
        registry: RegistryInput = None,
        cancel_event: threading.Event | None = None,
    ) -> list[MatchResult]:
        pairs, ranked_by = self._pairs(subject, counterparts)
        if not pairs:
            return []
        snapshot = as_registry(registry) if registry is not None else self._registry_loader()

        started = time.perf_counter()
        results: list[tuple[int, MatchResult]] = []
        cancelled = 0
        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(pairs))) as executor:
            futures = {
                executor.submit(self._evaluate_pair, candidate, job, snapshot, mode, cancel_event): (
                    index,
                    candidate,
                    job,
                )
                for index, (candidate, job) in enumerate(pairs)
            }
            for future in as_completed(futures):
                index, candidate, job = futures[future]
                if cancel_event is not None and cancel_event.is_set():
                    for pending in futures:
                        pending.cancel()
                if future.cancelled():
                    cancelled += 1
                    results.append((index, self._best_effort(candidate, job, snapshot, mode, [CANCELLED_NOTE])))
                    continue
                try:
                    results.append((index, future.result()))
                except Exception as exc:
                    self._logger.warning(
                        "batch.pair_failed",
                        candidate_id=candidate.candidate_id,
                        job_id=job.job_id,
                        error=str(exc),
                    )
                    results.append(
                        (
                            index,
                            self._best_effort(
                                candidate,
                                job,
                                snapshot,
                                mode,
                                [f"Evaluation failed ({exc}); scored without external lookups"],
                            ),
                        )
                    )

        # Submission order breaks ties between repeated counterpart ids.
        results.sort(key=lambda item: (relevance_key(item[1], by=ranked_by), item[0]))
        self._logger.info(
            "batch.completed",
            ranked_by=ranked_by,
            pairs=len(pairs),
            cancelled=cancelled,
            mode=mode,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return [result for _, result in results]

    @staticmethod
    def _pairs(
        subject: Profile, counterparts: Sequence[Profile]
    ) -> tuple[list[tuple[CandidateProfile, JobProfile]], str]:
        if isinstance(subject, CandidateProfile):
            jobs = [JobProfile.model_validate(item) if isinstance(item, dict) else item for item in counterparts]
            if not all(isinstance(job, JobProfile) for job in jobs):
                raise TypeError("counterparts of a candidate must be JobProfile instances")
            return [(subject, job) for job in jobs], "job"
        if isinstance(subject, JobProfile):
            candidates = [
                CandidateProfile.model_validate(item) if isinstance(item, dict) else item for item in counterparts
            ]
            if not all(isinstance(candidate, CandidateProfile) for candidate in candidates):
                raise TypeError("counterparts of a job must be CandidateProfile instances")
            return [(candidate, subject) for candidate in candidates], "candidate"
        raise TypeError(f"subject must be a CandidateProfile or JobProfile, got {type(subject).__name__}")

    def _evaluate_pair(
        self,
        candidate: CandidateProfile,
        job: JobProfile,
        registry: DomainRegistry | None,
        mode: MatchMode,
        cancel_event: threading.Event | None,
    ) -> MatchResult:
        if cancel_event is not None and cancel_event.is_set():
            return self._best_effort(candidate, job, registry, mode, [CANCELLED_NOTE])

        notes: list[str] = []
        override = self._lookup(
            "override", self._override_lookup, (candidate.candidate_id, job.job_id), candidate, job, notes
        )
        commute = self._lookup("commute", self._commute_lookup, (candidate, job), candidate, job, notes)
        return self._engine.evaluate(
            candidate,
            job,
            registry,
            override=override,
            commute=commute,
            as_of=self._as_of,
            mode=mode,
            notes=notes,
        )

    def _lookup(self, name, lookup, args, candidate: CandidateProfile, job: JobProfile, notes: list[str]):
        if lookup is None:
            return None
        try:
            return lookup(*args)
        except Exception as exc:
            self._logger.warning(
                "batch.pair_failed",
                lookup=name,
                candidate_id=candidate.candidate_id,
                job_id=job.job_id,
                error=str(exc),
            )
            notes.append(f"{name.capitalize()} lookup failed: {exc}")
            return None

    def _best_effort(
        self,
        candidate: CandidateProfile,
        job: JobProfile,
        registry: DomainRegistry | None,
        mode: MatchMode,
        notes: list[str],
    ) -> MatchResult:
        return self._engine.evaluate(candidate, job, registry, as_of=self._as_of, mode=mode, notes=notes)
