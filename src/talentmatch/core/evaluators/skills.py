"\"\"\"Skill matching with aliases, fuzzy hits and domain transferability.\"\"\""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from rapidfuzz import fuzz, process

from ..registry import DomainRegistry, normalize_skill

DEFAULT_SYNONYMS: dict[str, list[str]] = {
    "javascript": ["js", "ecmascript", "es6", "vanilla js"],
    "typescript": ["ts"],
    "react": ["reactjs", "react.js"],
    "vue": ["vuejs", "vue.js"],
    "angular": ["angularjs", "angular.js"],
    "next.js": ["nextjs"],
    "node.js": ["nodejs", "node"],
    "python": ["python3", "py"],
    "java": ["openjdk"],
    "c#": ["csharp", "c sharp"],
    ".net": ["dotnet", "asp.net"],
    "go": ["golang"],
    "postgresql": ["postgres", "psql"],
    "mysql": ["mariadb"],
    "mongodb": ["mongo"],
    "elasticsearch": ["elastic"],
    "aws": ["amazon web services"],
    "gcp": ["google cloud", "google cloud platform"],
    "azure": ["microsoft azure"],
    "kubernetes": ["k8s"],
    "ci/cd": ["cicd", "continuous integration", "continuous deployment"],
    "terraform": ["infrastructure as code", "iac"],
    "tailwind": ["tailwindcss", "tailwind css"],
    "sass": ["scss"],
    "react native": ["reactnative"],
    "machine learning": ["ml"],
    "deep learning": ["neural networks"],
    "pytorch": ["torch"],
    "spark": ["apache spark", "pyspark"],
    "buchhaltung": ["accounting", "buchführung"],
    "controlling": ["finanzcontrolling"],
    "agile": ["scrum", "kanban"],
    "git": ["github", "gitlab", "bitbucket"],
}

_WORD_SPLIT_RE = re.compile(r"\s+")


@dataclass
class SkillMatcherConfig:
    """Configuration for skill matching."""

    fuzzy_threshold: float = 92.0
    fuzzy_min_length: int = 5
    enable_fuzzy: bool = True
    transfer_credit: float = 0.7
    transferable_coverage_weight: float = 0.5
    keyword_extraction_min_words: int = 3
    synonyms: dict[str, list[str]] | None = None

    def __post_init__(self) -> None:
        if self.synonyms is None:
            self.synonyms = {key: list(values) for key, values in DEFAULT_SYNONYMS.items()}


@dataclass(frozen=True, slots=True)
class TransferableSkill:
    """A must-have covered through a related domain."""

    skill: str
    percentage: int
    job_domain: str
    via_domain: str


@dataclass(slots=True)
class SkillMatch:
    """Classification of job skills against a candidate skill set."""

    matched: list[str] = field(default_factory=list)
    transferable: list[TransferableSkill] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    must_have_missing: list[str] = field(default_factory=list)
    must_have_total: int = 0
    must_have_matched: int = 0
    nice_to_have_total: int = 0
    nice_to_have_matched: int = 0
    coverage: float = 0.0
    match_types: dict[str, str] = field(default_factory=dict)

    @property
    def transferable_names(self) -> list[str]:
        return [item.skill for item in self.transferable]


class SkillMatcher:
    """Classify job skills as matched, transferable or missing for a candidate."""

    method = "skills"

    def __init__(self, *, config: SkillMatcherConfig | None = None) -> None:
        self._config = config or SkillMatcherConfig()
        self._canonical = self._build_canonical_map(self._config.synonyms or {})

    def match(
        self,
        candidate_skills: Iterable[str],
        must_have: Sequence[str],
        nice_to_have: Sequence[str],
        registry: DomainRegistry | None,
    ) -> SkillMatch:
        held = set(self._normalize_all(candidate_skills))
        held_canonical = {self._canonical.get(skill, skill) for skill in held}
        held_sorted = sorted(held)
        must = self._normalize_all(must_have)
        nice = [skill for skill in self._normalize_all(nice_to_have) if skill not in must]

        result = SkillMatch(must_have_total=len(must), nice_to_have_total=len(nice))
        held_domains = registry.domains_for_skills(held) if registry is not None and held else frozenset()

        for skill in must:
            match_type = self._direct_match(skill, held, held_canonical, held_sorted, registry)
            if match_type is not None:
                result.matched.append(skill)
                result.must_have_matched += 1
                result.match_types[skill] = match_type
                continue
            transfer = self._transferable(skill, held_domains, registry)
            if transfer is not None:
                result.transferable.append(transfer)
                result.match_types[skill] = "transferable"
                continue
            result.missing.append(skill)
            result.must_have_missing.append(skill)
            result.match_types[skill] = "missing"

        for skill in nice:
            match_type = self._direct_match(skill, held, held_canonical, held_sorted, registry)
            if match_type is not None:
                result.matched.append(skill)
                result.nice_to_have_matched += 1
                result.match_types[skill] = match_type
            else:
                result.missing.append(skill)
                result.match_types[skill] = "missing"

        result.coverage = self._coverage(result)
        return result

    def _coverage(self, result: SkillMatch) -> float:
        if result.must_have_total == 0:
            return 1.0
        credited = (
            result.must_have_matched
            + self._config.transferable_coverage_weight * len(result.transferable)
        )
        return min(max(credited / max(1, result.must_have_total), 0.0), 1.0)

    def _direct_match(
        self,
        skill: str,
        held: set[str],
        held_canonical: set[str],
        held_sorted: list[str],
        registry: DomainRegistry | None,
    ) -> str | None:
        if not held:
            return None
        if skill in held:
            return "exact"
        if self._canonical.get(skill, skill) in held_canonical:
            return "alias"
        if self._config.enable_fuzzy and len(skill) >= self._config.fuzzy_min_length:
            best = process.extractOne(
                skill,
                held_sorted,
                scorer=fuzz.ratio,
                score_cutoff=self._config.fuzzy_threshold,
            )
            if best is not None:
                return "fuzzy"
        if registry is not None:
            for keyword in self._extract_keywords(skill, registry):
                if keyword in held or self._canonical.get(keyword, keyword) in held_canonical:
                    return "keyword"
        return None

    def _transferable(
        self,
        skill: str,
        held_domains: frozenset[str],
        registry: DomainRegistry | None,
    ) -> TransferableSkill | None:
        if registry is None or not held_domains:
            return None
        best: TransferableSkill | None = None
        for owner_key in registry.domains_for_skill(skill):
            owner = registry.get(owner_key)
            if owner is None:
                continue
            for target in owner.transferable_to:
                if target not in held_domains:
                    continue
                percentage = int(min(max(round(100 * owner.weight * self._config.transfer_credit), 0), 100))
                if best is None or percentage > best.percentage:
                    best = TransferableSkill(skill, percentage, owner_key, target)
        return best

    def _extract_keywords(self, skill: str, registry: DomainRegistry) -> list[str]:
        words = _WORD_SPLIT_RE.split(skill)
        if len(words) < self._config.keyword_extraction_min_words:
            return []
        padded = f" {skill} "
        return sorted(term for term in registry.vocabulary if f" {term} " in padded)

    def _normalize_all(self, skills: Iterable[str]) -> list[str]:
        seen: dict[str, None] = {}
        for skill in skills:
            if not isinstance(skill, str):
                continue
            normalized = normalize_skill(skill)
            if normalized:
                seen.setdefault(normalized, None)
        return list(seen)

    @staticmethod
    def _build_canonical_map(synonyms: dict[str, list[str]]) -> dict[str, str]:
        canonical: dict[str, str] = {}
        for name, aliases in sorted(synonyms.items()):
            key = normalize_skill(name)
            canonical.setdefault(key, key)
            for alias in aliases:
                canonical.setdefault(normalize_skill(alias), key)
        return canonical
