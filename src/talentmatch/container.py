"\"\"\"Dependency injection container for the match engine.\"\"\""

from __future__ import annotations

from pathlib import Path

from dependency_injector import containers, providers

from .core import (
    ConstraintScorer,
    DomainRegistry,
    ExplainabilityGenerator,
    FitScorer,
    GateEvaluator,
    MatchEngine,
    PolicyClassifier,
    SkillMatcher,
)
from .core.batch import BatchOrchestrator
from .core.evaluators.constraints import ConstraintConfig
from .core.evaluators.fit import FitConfig
from .core.evaluators.gates import GateConfig
from .core.evaluators.skills import SkillMatcherConfig
from .core.registry import RegistryConfig
from .pipeline import MatchPipeline
from .schemas.config import BatchConfig, ConfigurationError


class MatchContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()
    batch = providers.Configuration()

    registry = providers.Singleton(DomainRegistry.default)

    skill_matcher = providers.Singleton(SkillMatcher)
    fit_scorer = providers.Singleton(FitScorer, skill_matcher=skill_matcher)
    constraint_scorer = providers.Singleton(ConstraintScorer)
    gate_evaluator = providers.Singleton(GateEvaluator)
    explainer = providers.Singleton(ExplainabilityGenerator)

    policy = providers.Singleton(
        PolicyClassifier,
        thresholds=config.thresholds,
        preview_thresholds=config.preview_thresholds,
    )

    engine = providers.Singleton(
        MatchEngine,
        fit_scorer=fit_scorer,
        constraint_scorer=constraint_scorer,
        gate_evaluator=gate_evaluator,
        policy=policy,
        explainer=explainer,
        blend_weights=config.blend_weights,
        explain=batch.explain,
    )

    orchestrator = providers.Factory(
        BatchOrchestrator,
        engine,
        max_workers=batch.max_workers,
        registry_loader=registry.provider,
    )

    pipeline = providers.Factory(
        MatchPipeline,
        engine=engine,
        registry=registry,
        max_workers=batch.max_workers,
    )


def _build(config_cls, section: str, values: dict):
    try:
        return config_cls(**values)
    except TypeError as exc:
        raise ConfigurationError(f"evaluators.{section}: {exc}") from exc


def create_container(
    *,
    settings: dict | None = None,
    registry_path: str | Path | None = None,
) -> MatchContainer:
    """Instantiate container with optional overrides."""

    container = MatchContainer()
    settings = settings if isinstance(settings, dict) else {}

    container.batch.from_dict(BatchConfig(**(settings.get("batch") or {})).model_dump())

    core_settings = settings.get("core") or {}
    if core_settings:
        container.config.from_dict(core_settings)

    evaluator_settings = settings.get("evaluators", {})

    if "registry" in evaluator_settings or registry_path is not None:
        registry_config = _build(RegistryConfig, "registry", evaluator_settings.get("registry") or {})
        if registry_path is not None:
            container.registry.override(
                providers.Singleton(DomainRegistry.from_yaml, Path(registry_path), config=registry_config)
            )
        else:
            container.registry.override(providers.Singleton(DomainRegistry.default, config=registry_config))

    if "skills" in evaluator_settings:
        skills_config = _build(SkillMatcherConfig, "skills", evaluator_settings["skills"])
        container.skill_matcher.override(providers.Singleton(SkillMatcher, config=skills_config))

    if "fit" in evaluator_settings:
        fit_config = _build(FitConfig, "fit", evaluator_settings["fit"])
        container.fit_scorer.override(
            providers.Singleton(FitScorer, skill_matcher=container.skill_matcher, config=fit_config)
        )

    if "constraints" in evaluator_settings:
        constraint_config = _build(ConstraintConfig, "constraints", evaluator_settings["constraints"])
        container.constraint_scorer.override(
            providers.Singleton(ConstraintScorer, config=constraint_config)
        )

    if "gates" in evaluator_settings:
        gate_config = _build(GateConfig, "gates", evaluator_settings["gates"])
        container.gate_evaluator.override(providers.Singleton(GateEvaluator, config=gate_config))

    return container
