"\"\"\"Pydantic configuration schema for CLI YAML input.\"\"\""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ConfigurationError(ValueError):
    """Raised when engine configuration is structurally unusable."""


class CoreConfig(BaseModel):
    blend_weights: dict[str, float] | None = None
    thresholds: dict[str, float] | None = None
    preview_thresholds: dict[str, float] | None = None

    model_config = ConfigDict(extra="forbid")


class EvaluatorConfig(BaseModel):
    skills: dict[str, Any] | None = None
    fit: dict[str, Any] | None = None
    constraints: dict[str, Any] | None = None
    gates: dict[str, Any] | None = None
    registry: dict[str, Any] | None = None

    model_config = ConfigDict(extra="forbid")


class BatchConfig(BaseModel):
    max_workers: int = Field(default=8, ge=1)
    explain: Literal["basic", "enhanced"] = "enhanced"

    model_config = ConfigDict(extra="forbid")


class AppConfig(BaseModel):
    core: CoreConfig = Field(default_factory=CoreConfig)
    evaluators: EvaluatorConfig = Field(default_factory=EvaluatorConfig)
    batch: BatchConfig | None = None

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        core = self.core.model_dump(exclude_none=True)
        if core:
            settings["core"] = core
        evaluator_settings = self.evaluators.model_dump(exclude_none=True)
        if evaluator_settings:
            settings["evaluators"] = evaluator_settings
        if self.batch is not None:
            settings["batch"] = self.batch.model_dump()
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)


def require_weights(weights: dict[str, Any], *, section: str) -> dict[str, float]:
    """Validate a weight mapping, rejecting non-numeric or all-zero weights."""
    if not isinstance(weights, dict) or not weights:
        raise ConfigurationError(f"{section}: weights must be a non-empty mapping")
    validated: dict[str, float] = {}
    for name, value in weights.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigurationError(
                f"{section}: weight {name!r} must be numeric, got {value!r}"
            )
        if value < 0:
            raise ConfigurationError(f"{section}: weight {name!r} must not be negative")
        validated[name] = float(value)
    if sum(validated.values()) <= 0:
        raise ConfigurationError(f"{section}: weights must not sum to zero")
    return validated
