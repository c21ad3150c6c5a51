"\"\"\"Typer CLI entrypoint for the match pipeline.\"\"\""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from pydantic import ValidationError

from .config import ConfigManager, merge_settings
from .container import create_container
from .logging import configure_logging
from .pipeline import AuditLogger, SubjectKind
from .schemas.config import ConfigurationError, load_config

app = typer.Typer(help="Candidate-job match scoring CLI.")


class Mode(str, Enum):
    exact = "exact"
    preview = "preview"


def _load_settings(config: Optional[Path], workers: Optional[int]) -> dict[str, Any]:
    settings = ConfigManager().load("matching")
    if config:
        with config.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
            if not isinstance(loaded, dict):
                raise typer.BadParameter("Config file must be a YAML object", param_name="config")
            settings = merge_settings(settings, loaded)
    if workers is not None:
        settings = merge_settings(settings, {"batch": {"max_workers": workers}})
    try:
        return load_config(settings).to_settings()
    except ValidationError as exc:
        raise typer.BadParameter(str(exc), param_name="config") from exc


def _run(
    *,
    subject_kind: SubjectKind,
    subject: Path,
    counterparts: Path,
    output: Path,
    mode: Mode,
    as_of: Optional[str],
    registry: Optional[Path],
    config: Optional[Path],
    overrides: Optional[Path],
    commute: Optional[Path],
    audit_log: Optional[Path],
    workers: Optional[int],
    log_level: str,
) -> list[dict]:
    settings = _load_settings(config, workers)
    configure_logging(log_level)

    try:
        container = create_container(settings=settings, registry_path=registry)
        pipeline = container.pipeline()
    except ConfigurationError as exc:
        raise typer.BadParameter(str(exc), param_name="config") from exc
    audit_logger = AuditLogger(audit_log) if audit_log else None

    return pipeline.run(
        subject_path=subject,
        counterparts_path=counterparts,
        output_path=output,
        subject_kind=subject_kind,
        mode=mode.value,
        as_of=as_of,
        overrides_path=overrides,
        commute_path=commute,
        audit_logger=audit_logger,
    )


_OUTPUT = typer.Option(
    ...,
    exists=False,
    file_okay=True,
    dir_okay=False,
    resolve_path=True,
    help="Output JSON path.",
)
_MODE = typer.Option(Mode.exact, case_sensitive=False, help="exact or preview thresholds.")
_AS_OF = typer.Option(None, help="Reference date (ISO) for notice-period availability. Defaults to today.")
_REGISTRY = typer.Option(None, exists=True, readable=True, dir_okay=False, help="Domain registry YAML path.")
_CONFIG = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path.")
_OVERRIDES = typer.Option(None, exists=True, readable=True, dir_okay=False, help="Commute overrides (JSONL/JSON).")
_COMMUTE = typer.Option(None, exists=True, readable=True, dir_okay=False, help="Travel times (JSONL/JSON).")
_AUDIT = typer.Option(None, dir_okay=False, help="Audit log output (JSONL).")
_WORKERS = typer.Option(None, min=1, help="Concurrent pair evaluations.")
_LOG_LEVEL = typer.Option("INFO", help="Log level for structured logging.")


@app.command()
def match(
    candidate: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Candidate JSON path."),
    jobs: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Jobs JSONL/JSON path."),
    output: Path = _OUTPUT,
    mode: Mode = _MODE,
    as_of: Optional[str] = _AS_OF,
    registry: Optional[Path] = _REGISTRY,
    config: Optional[Path] = _CONFIG,
    overrides: Optional[Path] = _OVERRIDES,
    commute: Optional[Path] = _COMMUTE,
    audit_log: Optional[Path] = _AUDIT,
    workers: Optional[int] = _WORKERS,
    log_level: str = _LOG_LEVEL,
) -> None:
    """Rank jobs for one candidate."""
    results = _run(
        subject_kind="candidate",
        subject=candidate,
        counterparts=jobs,
        output=output,
        mode=mode,
        as_of=as_of,
        registry=registry,
        config=config,
        overrides=overrides,
        commute=commute,
        audit_log=audit_log,
        workers=workers,
        log_level=log_level,
    )
    typer.echo(f"Ranked {len(results)} jobs. Results saved to {output}.")


@app.command()
def rank(
    job: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Job JSON path."),
    candidates: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=False, help="Candidates JSONL/JSON path."
    ),
    output: Path = _OUTPUT,
    mode: Mode = _MODE,
    as_of: Optional[str] = _AS_OF,
    registry: Optional[Path] = _REGISTRY,
    config: Optional[Path] = _CONFIG,
    overrides: Optional[Path] = _OVERRIDES,
    commute: Optional[Path] = _COMMUTE,
    audit_log: Optional[Path] = _AUDIT,
    workers: Optional[int] = _WORKERS,
    log_level: str = _LOG_LEVEL,
) -> None:
    """Rank candidates for one job."""
    results = _run(
        subject_kind="job",
        subject=job,
        counterparts=candidates,
        output=output,
        mode=mode,
        as_of=as_of,
        registry=registry,
        config=config,
        overrides=overrides,
        commute=commute,
        audit_log=audit_log,
        workers=workers,
        log_level=log_level,
    )
    typer.echo(f"Ranked {len(results)} candidates. Results saved to {output}.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
