from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from talentmatch.config import ConfigManager, merge_settings
from talentmatch.container import create_container
from talentmatch.schemas import CandidateProfile, JobProfile
from talentmatch.schemas.config import AppConfig, ConfigurationError, load_config


def test_create_container_with_overrides():
    container = create_container(
        settings={
            "core": {
                "blend_weights": {"fit": 0.6, "constraints": 0.4},
                "thresholds": {"hot": 90, "standard": 75, "maybe": 55},
            },
            "evaluators": {
                "skills": {"fuzzy_threshold": 88},
                "fit": {"weights": {"skills": 0.6, "experience": 0.2, "seniority": 0.2}},
                "constraints": {"default_max_commute_minutes": 60},
                "gates": {"salary_tolerance_percent": 15, "salary_tiers": [[15, 0.4]]},
                "registry": {"title_floor": 0.7},
            },
            "batch": {"max_workers": 3, "explain": "basic"},
        }
    )

    skills = container.skill_matcher()
    fit = container.fit_scorer()
    constraints = container.constraint_scorer()
    gates = container.gate_evaluator()
    engine = container.engine()
    registry = container.registry()
    orchestrator = container.orchestrator()

    assert skills._config.fuzzy_threshold == 88
    assert fit._config.weights["skills"] == 0.6
    assert fit._skills is skills
    assert constraints._config.default_max_commute_minutes == 60
    assert gates._config.salary_tiers == [(15.0, 0.4)]
    assert registry._config.title_floor == 0.7
    assert engine._blend_weights == {"fit": 0.6, "constraints": 0.4}
    assert engine.policy.thresholds["hot"] == 90
    assert engine._explain == "basic"
    assert orchestrator._max_workers == 3
    assert orchestrator._engine is engine


def test_core_settings_change_engine_scoring():
    candidate = CandidateProfile(candidate_id="C-1", skills=["java"])
    job = JobProfile(job_id="J-1", must_have_skills=["java", "cobol"], remote=True)
    tuned = create_container(
        settings={
            "core": {
                "blend_weights": {"fit": 0.4, "constraints": 0.6},
                "thresholds": {"hot": 90, "standard": 88, "maybe": 50},
            }
        }
    )

    default_result = create_container().engine().evaluate(candidate, job)
    tuned_result = tuned.engine().evaluate(candidate, job)

    assert (default_result.overall, default_result.policy) == (83, "standard")
    assert (tuned_result.overall, tuned_result.policy) == (90, "hot")


def test_default_container_uses_bundled_registry():
    container = create_container()

    registry = container.registry()

    assert len(registry) == 13
    assert container.engine()._blend_weights == {"fit": 0.7, "constraints": 0.3}
    assert container.orchestrator()._max_workers == 8


def test_registry_path_overrides_bundled_registry(tmp_path: Path):
    path = tmp_path / "domains.yaml"
    path.write_text("domains:\n  - domain_key: alpha\n    primary_skills: [rust]\n", encoding="utf-8")

    container = create_container(registry_path=path)

    assert container.registry().keys == ["alpha"]


def test_unknown_evaluator_option_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        create_container(settings={"evaluators": {"fit": {"weight": {"skills": 1}}}})


def test_non_numeric_weights_fail_when_engine_is_built():
    container = create_container(settings={"core": {"blend_weights": {"fit": "high", "constraints": 0.3}}})

    with pytest.raises(ConfigurationError):
        container.engine()


def test_load_config_validation():
    data = {
        "core": {"blend_weights": {"fit": 0.8, "constraints": 0.2}},
        "evaluators": {"fit": {"nice_to_have_bonus": 5}},
    }
    app_config = load_config(data)
    assert isinstance(app_config, AppConfig)
    settings = app_config.to_settings()
    assert settings["core"]["blend_weights"]["fit"] == 0.8
    assert settings["evaluators"]["fit"]["nice_to_have_bonus"] == 5
    assert "batch" not in settings


def test_load_config_rejects_unknown_sections():
    with pytest.raises(ValidationError):
        load_config({"core": {"score_weights": {"fit": 1}}})
    with pytest.raises(ValidationError):
        load_config(["not", "a", "mapping"])


def test_bundled_defaults_round_trip_through_config_schema():
    defaults = ConfigManager().load("matching")

    settings = load_config(defaults).to_settings()

    assert settings["core"]["thresholds"] == {"hot": 85, "standard": 70, "maybe": 50}
    assert settings["batch"] == {"max_workers": 8, "explain": "enhanced"}


def test_merge_settings_overlays_nested_sections():
    base = {"core": {"thresholds": {"hot": 85, "maybe": 50}}, "batch": {"max_workers": 8}}

    merged = merge_settings(base, {"core": {"thresholds": {"hot": 90}}})

    assert merged["core"]["thresholds"] == {"hot": 90, "maybe": 50}
    assert merged["batch"] == {"max_workers": 8}
    assert base["core"]["thresholds"]["hot"] == 85
