"\"\"\"Core match scoring engine components.\"\"\""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .batch import BatchOrchestrator, relevance_key
from .engine import MatchEngine, as_registry
from .evaluators import (
    ConstraintScorer,
    FitScorer,
    GateEvaluator,
    SkillMatcher,
)
from .explain import ExplainabilityGenerator
from .policy import MatchMode, PolicyClassifier
from .registry import DomainDetection, DomainRegistry, RegistryConfig, normalize_skill

__all__ = [
    "BatchOrchestrator",
    "ConstraintScorer",
    "DomainDetection",
    "DomainRegistry",
    "ExplainabilityGenerator",
    "FitScorer",
    "GateEvaluator",
    "MatchEngine",
    "MatchMode",
    "PolicyClassifier",
    "RegistryConfig",
    "SkillMatcher",
    "as_registry",
    "normalize_skill",
    "relevance_key",
]
