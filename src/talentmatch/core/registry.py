"""Read-only snapshot of the technology/role domain registry."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Mapping

from ..config import BUNDLED_CONFIG_DIR, load_yaml
from ..schemas import TechDomain

OTHER_DOMAIN = "other"

_PUNCTUATION_RE = re.compile(r"[^\w\s./\-#+]")
_TRAILING_VERSION_RE = re.compile(r"\s+\d+(?:\.\d+)*\s*$")
_TITLE_SEPARATOR_RE = re.compile(r"[^\w\s#+.\-]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_skill(skill: str) -> str:
    """Lowercase, strip punctuation and trailing version numbers."""
    value = _PUNCTUATION_RE.sub("", skill.lower().strip())
    value = _TRAILING_VERSION_RE.sub("", value)
    return _WHITESPACE_RE.sub(" ", value).strip()


@dataclass
class RegistryConfig:
    """Tuning for dominant-domain detection."""

    secondary_weight: float = 0.5
    title_floor: float = 0.6
    min_confidence: float = 0.15
    secondary_cutoff: float = 0.1


@dataclass(frozen=True, slots=True)
class DomainDetection:
    """Dominant domain inferred from skills and a title."""

    primary: str
    secondary: str | None
    confidence: float
    scores: Mapping[str, float] = field(default_factory=dict)
    explicit: bool = False

    @property
    def is_confident(self) -> bool:
        return self.primary != OTHER_DOMAIN and self.confidence > 0


class DomainRegistry:
    """Immutable lookup structure over active domain rows.

    The registry indexes vocabulary membership once at construction so skill
    and title lookups are dictionary hits. Detection results are memoized per
    snapshot, which lets a batch resolve a shared subject only once.
    """

    def __init__(
        self,
        domains: Iterable[TechDomain | Mapping[str, Any]],
        *,
        config: RegistryConfig | None = None,
        version: str | None = None,
    ) -> None:
        self._config = config or RegistryConfig()
        self.version = version
        parsed = [
            item if isinstance(item, TechDomain) else TechDomain.model_validate(item)
            for item in domains
        ]
        self._domains: dict[str, TechDomain] = {
            domain.key: domain for domain in sorted(parsed, key=lambda d: d.key) if domain.active
        }
        self._primary_index: dict[str, tuple[str, ...]] = {}
        self._secondary_index: dict[str, tuple[str, ...]] = {}
        self._title_index: dict[str, tuple[str, ...]] = {}
        self._build_indexes()
        self._incompatible = self._symmetric_incompatibility()
        self._detect_cached = lru_cache(maxsize=4096)(self._detect)

    @classmethod
    def from_yaml(cls, path: str | Path, *, config: RegistryConfig | None = None) -> "DomainRegistry":
        data = load_yaml(path)
        version = data.get("version")
        return cls(
            data.get("domains") or [],
            config=config,
            version=str(version) if version is not None else None,
        )

    @classmethod
    def default(cls, *, config: RegistryConfig | None = None) -> "DomainRegistry":
        return cls.from_yaml(BUNDLED_CONFIG_DIR / "domains.yaml", config=config)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.strip().lower() in self._domains

    def __len__(self) -> int:
        return len(self._domains)

    def __iter__(self):
        return iter(self._domains.values())

    @property
    def keys(self) -> list[str]:
        return list(self._domains)

    def get(self, key: str | None) -> TechDomain | None:
        if key is None:
            return None
        return self._domains.get(key.strip().lower())

    def display_name(self, key: str) -> str:
        domain = self.get(key)
        if domain is None or not domain.display_name:
            return key
        return domain.display_name

    @property
    def vocabulary(self) -> frozenset[str]:
        """Every normalized skill term known to the registry."""
        return self._vocabulary

    def domains_for_skill(self, skill: str) -> tuple[str, ...]:
        """Domains owning a skill through primary/secondary/title vocabularies."""
        term = normalize_skill(skill)
        owners = (
            self._primary_index.get(term, ())
            + self._secondary_index.get(term, ())
            + self._title_index.get(term, ())
        )
        return tuple(sorted(set(owners)))

    def domains_for_skills(self, skills: Iterable[str]) -> frozenset[str]:
        owned: set[str] = set()
        for skill in skills:
            owned.update(self.domains_for_skill(skill))
        return frozenset(owned)

    def is_incompatible(self, first: str, second: str) -> bool:
        return frozenset((first, second)) in self._incompatible

    def is_transferable(self, source: str, target: str) -> bool:
        domain = self.get(source)
        return domain is not None and target in domain.transferable_to

    def detect(self, skills: Iterable[str], title: str | None = None) -> DomainDetection:
        normalized = tuple(sorted({normalize_skill(s) for s in skills if s and s.strip()}))
        title_key = " ".join(title.lower().split()) if title else ""
        return self._detect_cached(normalized, title_key)

    def _detect(self, skills: tuple[str, ...], title: str) -> DomainDetection:
        scores: dict[str, float] = {key: 0.0 for key in self._domains}
        if skills:
            for skill in skills:
                for key in self._primary_index.get(skill, ()):
                    scores[key] += 1.0
                for key in self._secondary_index.get(skill, ()):
                    scores[key] += self._config.secondary_weight
            scores = {key: value / len(skills) for key, value in scores.items()}

        if title:
            padded = f" {_WHITESPACE_RE.sub(' ', _TITLE_SEPARATOR_RE.sub(' ', title))} "
            for key, domain in self._domains.items():
                if any(f" {keyword} " in padded for keyword in domain.title_keywords):
                    scores[key] = max(scores[key], self._config.title_floor)

        ranked = sorted(scores.items(), key=lambda item: (-item[1], item[0]))
        if not ranked or ranked[0][1] <= 0:
            return DomainDetection(OTHER_DOMAIN, None, 0.0, scores)

        primary, confidence = ranked[0]
        secondary = None
        if len(ranked) > 1 and ranked[1][1] > self._config.secondary_cutoff:
            secondary = ranked[1][0]
        return DomainDetection(primary, secondary, round(confidence, 6), scores)

    def _build_indexes(self) -> None:
        primary: dict[str, list[str]] = {}
        secondary: dict[str, list[str]] = {}
        titles: dict[str, list[str]] = {}
        for key, domain in self._domains.items():
            for term in domain.primary_skills:
                primary.setdefault(normalize_skill(term), []).append(key)
            for term in domain.secondary_skills:
                secondary.setdefault(normalize_skill(term), []).append(key)
            for term in domain.title_keywords:
                titles.setdefault(normalize_skill(term), []).append(key)
        self._primary_index = {term: tuple(keys) for term, keys in primary.items()}
        self._secondary_index = {term: tuple(keys) for term, keys in secondary.items()}
        self._title_index = {term: tuple(keys) for term, keys in titles.items()}
        self._vocabulary = frozenset(self._primary_index) | frozenset(self._secondary_index)

    def _symmetric_incompatibility(self) -> frozenset[frozenset[str]]:
        pairs: set[frozenset[str]] = set()
        for key, domain in self._domains.items():
            for other in domain.incompatible_with:
                if other != key:
                    pairs.add(frozenset((key, other)))
        return frozenset(pairs)


__all__ = [
    "OTHER_DOMAIN",
    "DomainDetection",
    "DomainRegistry",
    "RegistryConfig",
    "normalize_skill",
]
