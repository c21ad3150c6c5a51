"""Shared numeric helpers for the scoring evaluators."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping

NEUTRAL_SCORE = 50


@dataclass(frozen=True, slots=True)
class DataGap:
    """A factor scored neutrally because an input was absent."""

    factor: str
    message: str


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return min(max(value, low), high)


def round_score(value: float) -> int:
    """Round half up and clamp to the 0-100 scale."""
    if math.isnan(value):
        return NEUTRAL_SCORE
    return int(clamp(math.floor(value + 0.5)))


def weighted_average(values: Mapping[str, float], weights: Mapping[str, float]) -> float:
    total = sum(weights.get(name, 0.0) for name in values)
    if total <= 0:
        return float(NEUTRAL_SCORE)
    return sum(value * weights.get(name, 0.0) for name, value in values.items()) / total
