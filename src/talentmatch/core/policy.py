"""Policy tier classification."""

from __future__ import annotations

from typing import Literal, Mapping

from ..schemas import PolicyTier
from ..schemas.config import ConfigurationError

MatchMode = Literal["exact", "preview"]

_TIER_ORDER: tuple[PolicyTier, ...] = ("hot", "standard", "maybe")


class PolicyClassifier:
    """Map a final score and gate state onto hot/standard/maybe/hidden."""

    DEFAULT_THRESHOLDS: dict[str, float] = {"hot": 85, "standard": 70, "maybe": 50}
    DEFAULT_PREVIEW_THRESHOLDS: dict[str, float] = {"hot": 85, "standard": 70, "maybe": 35}

    def __init__(
        self,
        *,
        thresholds: Mapping[str, float] | None = None,
        preview_thresholds: Mapping[str, float] | None = None,
    ) -> None:
        self._thresholds = self._validate({**self.DEFAULT_THRESHOLDS, **(thresholds or {})})
        self._preview = self._validate(
            {**self.DEFAULT_PREVIEW_THRESHOLDS, **(preview_thresholds or {})}
        )

    @property
    def thresholds(self) -> dict[str, float]:
        return dict(self._thresholds)

    def threshold(self, tier: str, *, mode: MatchMode = "exact") -> float:
        thresholds = self._preview if mode == "preview" else self._thresholds
        return thresholds[tier]

    def classify(
        self,
        overall: int,
        *,
        is_incompatible: bool = False,
        is_killed: bool = False,
        mode: MatchMode = "exact",
    ) -> PolicyTier:
        if is_incompatible or is_killed:
            return "hidden"
        thresholds = self._preview if mode == "preview" else self._thresholds
        for tier in _TIER_ORDER:
            if overall >= thresholds[tier]:
                return tier
        return "hidden"

    @staticmethod
    def _validate(thresholds: dict[str, float]) -> dict[str, float]:
        for tier in _TIER_ORDER:
            value = thresholds.get(tier)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"policy threshold {tier!r} must be numeric, got {value!r}")
        if not thresholds["hot"] >= thresholds["standard"] >= thresholds["maybe"]:
            raise ConfigurationError("policy thresholds must satisfy hot >= standard >= maybe")
        return {tier: float(thresholds[tier]) for tier in _TIER_ORDER}
