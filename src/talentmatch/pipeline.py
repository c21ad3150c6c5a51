"\"\"\"File-based match pipeline assembly and execution.\"\"\""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Generic, Iterator, Literal, Type, TypeVar

import pendulum
import structlog
from pydantic import BaseModel

from .core import BatchOrchestrator, DomainRegistry, MatchEngine, MatchMode
from .schemas import CandidateProfile, CommuteEstimate, CommuteOverride, JobProfile, MatchResult
from . import __version__

SubjectKind = Literal["candidate", "job"]
PairKey = tuple[str, str]
ModelT = TypeVar("ModelT", bound=BaseModel)


class ProfileLoadError(ValueError):
    """Raised when record loading encounters invalid entries."""

    def __init__(self, errors: list[str], partial: list):
        super().__init__("Record loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Record loading failed: {self.errors}"


def _iter_records(path: Path, errors: list[str]) -> Iterator[tuple[str, object]]:
    """Yield (location, record) from a JSON array/object or a JSONL file."""
    if path.suffix.lower() == ".json":
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                errors.append(f"{path.name}: invalid JSON ({exc})")
                return
        items = data if isinstance(data, list) else [data]
        for idx, item in enumerate(items, start=1):
            yield f"item {idx}", item
        return

    with path.open("r", encoding="utf-8") as handle:
        for idx, line in enumerate(handle, start=1):
            raw = line.strip()
            if not raw:
                continue
            try:
                yield f"line {idx}", json.loads(raw)
            except json.JSONDecodeError as exc:
                errors.append(f"line {idx}: invalid JSON ({exc})")


class RecordLoader(Generic[ModelT]):
    """Load and validate pydantic records, collecting per-record errors."""

    def __init__(self, model: Type[ModelT]):
        self._model = model

    def load(self, path: Path) -> list[ModelT]:
        records: list[ModelT] = []
        errors: list[str] = []
        for location, payload in _iter_records(path, errors):
            if not isinstance(payload, dict):
                errors.append(f"{location}: expected a JSON object")
                continue
            try:
                records.append(self._model.model_validate(payload))
            except Exception as exc:  # noqa: BLE001
                errors.append(f"{location}: {exc}")
        if errors:
            raise ProfileLoadError(errors, records)
        return records


class CandidateLoader(RecordLoader[CandidateProfile]):
    def __init__(self) -> None:
        super().__init__(CandidateProfile)


class JobLoader(RecordLoader[JobProfile]):
    def __init__(self) -> None:
        super().__init__(JobProfile)


class OverrideLoader:
    """Load commute overrides keyed by (candidate_id, job_id); the latest response wins."""

    def load(self, path: Path) -> dict[PairKey, CommuteOverride]:
        overrides: dict[PairKey, CommuteOverride] = {}
        partial: list[CommuteOverride] = []
        errors: list[str] = []
        try:
            partial = RecordLoader(CommuteOverride).load(path)
        except ProfileLoadError as exc:
            partial, errors = exc.partial, exc.errors
        for override in partial:
            key = (override.candidate_id, override.job_id)
            current = overrides.get(key)
            if current is None or _responded(override) >= _responded(current):
                overrides[key] = override
        if errors:
            raise ProfileLoadError(errors, list(overrides.values()))
        return overrides


def _responded(override: CommuteOverride) -> float:
    return override.responded_at.timestamp() if override.responded_at else float("-inf")


class CommuteRecord(CommuteEstimate):
    candidate_id: str
    job_id: str


class CommuteLoader:
    """Load precomputed travel times keyed by (candidate_id, job_id)."""

    def load(self, path: Path) -> dict[PairKey, CommuteEstimate]:
        try:
            records = RecordLoader(CommuteRecord).load(path)
        except ProfileLoadError as exc:
            raise ProfileLoadError(exc.errors, self._index(exc.partial)) from exc
        return self._index(records)

    @staticmethod
    def _index(records: list[CommuteRecord]) -> dict[PairKey, CommuteEstimate]:
        return {
            (record.candidate_id, record.job_id): CommuteEstimate(
                minutes=record.minutes, mode=record.mode, source=record.source
            )
            for record in records
        }


class OutputWriter:
    """Persist match results."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )


class AuditLogger:
    """Append-only audit logger writing JSON lines."""

    def __init__(self, path: Path):
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: dict) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False))
            handle.write("\n")


def parse_as_of(value: str | date | None) -> date:
    """Reference date for notice-period arithmetic; defaults to today."""
    if value is None:
        return pendulum.today().date()
    if isinstance(value, date):
        return value
    parsed = pendulum.parse(value, strict=False)
    return date(parsed.year, parsed.month, parsed.day)


class MatchPipeline:
    """End-to-end ranking of one subject file against a counterpart file."""

    def __init__(
        self,
        *,
        engine: MatchEngine,
        registry: DomainRegistry,
        max_workers: int = BatchOrchestrator.DEFAULT_MAX_WORKERS,
        candidate_loader: CandidateLoader | None = None,
        job_loader: JobLoader | None = None,
        override_loader: OverrideLoader | None = None,
        commute_loader: CommuteLoader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._engine = engine
        self._registry = registry
        self._max_workers = max_workers
        self._candidates = candidate_loader or CandidateLoader()
        self._jobs = job_loader or JobLoader()
        self._overrides = override_loader or OverrideLoader()
        self._commutes = commute_loader or CommuteLoader()
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def run(
        self,
        *,
        subject_path: Path,
        counterparts_path: Path,
        output_path: Path,
        subject_kind: SubjectKind = "candidate",
        mode: MatchMode = "exact",
        as_of: str | date | None = None,
        overrides_path: Path | None = None,
        commute_path: Path | None = None,
        audit_logger: "AuditLogger | None" = None,
    ) -> list[dict]:
        subject_loader, counterpart_loader = (
            (self._candidates, self._jobs) if subject_kind == "candidate" else (self._jobs, self._candidates)
        )
        subjects = subject_loader.load(subject_path)
        if len(subjects) != 1:
            raise ValueError(f"{subject_path}: expected exactly one {subject_kind} record, got {len(subjects)}")
        subject = subjects[0]

        load_errors: list[str] = []
        counterparts = self._load_partial(
            counterpart_loader, counterparts_path, load_errors, "jobs" if subject_kind == "candidate" else "candidates"
        )
        overrides = (
            self._load_partial(self._overrides, overrides_path, load_errors, "overrides") if overrides_path else {}
        )
        commutes = (
            self._load_partial(self._commutes, commute_path, load_errors, "commute") if commute_path else {}
        )

        reference_date = parse_as_of(as_of)
        orchestrator = BatchOrchestrator(
            self._engine,
            max_workers=self._max_workers,
            registry_loader=lambda: self._registry,
            commute_lookup=lambda candidate, job: commutes.get((candidate.candidate_id, job.job_id)),
            override_lookup=lambda candidate_id, job_id: overrides.get((candidate_id, job_id)),
            as_of=reference_date,
        )
        results = orchestrator.evaluate_batch(subject, counterparts, mode)

        serialized_results: list[dict] = []
        for result in results:
            serialized_results.append(result.to_payload())
            if audit_logger:
                audit_logger.append(self._audit_record(result, mode))
            self._logger.info(
                "match.result",
                candidate_id=result.candidate_id,
                job_id=result.job_id,
                overall=result.overall,
                policy=result.policy,
                gate_multiplier=result.gate_multiplier,
            )

        metadata = {
            "subject_kind": subject_kind,
            "subject_id": subject.candidate_id if subject_kind == "candidate" else subject.job_id,
            "mode": mode,
            "as_of": reference_date.isoformat(),
            "counterpart_count": len(counterparts),
            "registry_version": self._registry.version,
            "errors": load_errors,
            "timestamp": pendulum.now().to_iso8601_string(),
            "app_version": __version__,
        }
        self._writer.write(output_path, {"metadata": metadata, "results": serialized_results})
        return serialized_results

    def _load_partial(self, loader, path: Path, errors: list[str], label: str):
        try:
            return loader.load(path)
        except ProfileLoadError as exc:
            errors.extend(exc.errors)
            self._logger.warning(f"{label}.partial_load", errors=exc.errors)
            return exc.partial

    @staticmethod
    def _audit_record(result: MatchResult, mode: MatchMode) -> dict:
        return {
            "candidate_id": result.candidate_id,
            "job_id": result.job_id,
            "version": result.version,
            "mode": mode,
            "overall": result.overall,
            "policy": result.policy,
            "gate_multiplier": result.gate_multiplier,
            "dealbreakers": result.gates.dealbreakers.model_dump(mode="json", by_alias=True),
            "must_have_coverage": result.must_have_coverage,
            "notes": result.explainability.notes,
        }
