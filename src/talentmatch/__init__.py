"""Candidate-job match scoring engine."""

from __future__ import annotations

__version__ = "3.1.0"

from .api import evaluate, evaluate_batch  # noqa: E402

__all__ = ["__version__", "evaluate", "evaluate_batch"]
