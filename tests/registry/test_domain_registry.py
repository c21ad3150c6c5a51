from __future__ import annotations

from pathlib import Path

import pytest

from talentmatch.core.registry import OTHER_DOMAIN, DomainRegistry, normalize_skill
from talentmatch.schemas import TechDomain


def build_registry() -> DomainRegistry:
    return DomainRegistry(
        [
            {
                "domain_key": "alpha",
                "display_name": "Alpha",
                "primary_skills": ["Rust", "tokio"],
                "secondary_skills": ["linux"],
                "title_keywords": ["systems"],
                "transferable_to": ["beta"],
                "incompatible_with": ["gamma"],
            },
            {
                "domain_key": "beta",
                "primary_skills": ["go", "grpc"],
                "secondary_skills": ["linux"],
            },
            {"domain_key": "gamma", "primary_skills": ["figma"]},
            {"domain_key": "retired", "primary_skills": ["cobol"], "active": False},
        ],
        version="test",
    )


def test_default_registry_ships_thirteen_domains():
    registry = DomainRegistry.default()

    assert len(registry) == 13
    assert registry.version == "2024.11"
    assert "backend_cloud" in registry
    assert " Backend_Cloud " in registry
    assert "iot" not in registry


def test_inactive_domains_are_excluded():
    registry = build_registry()

    assert registry.keys == ["alpha", "beta", "gamma"]
    assert registry.get("retired") is None
    assert registry.domains_for_skill("cobol") == ()


def test_incompatibility_is_symmetric_even_when_stored_one_way():
    registry = build_registry()

    assert registry.is_incompatible("alpha", "gamma")
    assert registry.is_incompatible("gamma", "alpha")
    assert not registry.is_incompatible("alpha", "beta")


def test_transferability_is_directed():
    registry = build_registry()

    assert registry.is_transferable("alpha", "beta")
    assert not registry.is_transferable("beta", "alpha")


def test_domains_for_skill_uses_all_vocabularies():
    registry = build_registry()

    assert registry.domains_for_skill("Linux") == ("alpha", "beta")
    assert registry.domains_for_skill("systems") == ("alpha",)
    assert registry.domains_for_skills(["rust", "grpc"]) == frozenset({"alpha", "beta"})


def test_display_name_falls_back_to_key():
    registry = build_registry()

    assert registry.display_name("alpha") == "Alpha"
    assert registry.display_name("beta") == "beta"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("React 18", "react"),
        ("  Node.js ", "node.js"),
        ("C#", "c#"),
        ("Python3", "python3"),
        ("Spring   Boot", "spring boot"),
        ("CI/CD", "ci/cd"),
        ("Angular 16.2", "angular"),
    ],
)
def test_normalize_skill(raw: str, expected: str):
    assert normalize_skill(raw) == expected


def test_detect_scores_primary_and_secondary_hits():
    registry = DomainRegistry.default()

    detection = registry.detect(["Java", "Spring", "AWS"])

    assert detection.primary == "backend_cloud"
    assert detection.confidence == pytest.approx(1.0)
    assert detection.secondary == "devops"
    assert detection.scores["devops"] == pytest.approx(0.5 / 3)
    assert detection.is_confident


def test_detect_title_keyword_sets_floor():
    registry = DomainRegistry.default()

    detection = registry.detect([], "Senior DevOps Engineer")

    assert detection.primary == "devops"
    assert detection.confidence == pytest.approx(0.6)


def test_detect_title_keywords_match_whole_words_only():
    registry = build_registry()

    assert registry.detect([], "Ecosystems Lead").primary == OTHER_DOMAIN
    assert registry.detect([], "Systems/Platform Lead").primary == "alpha"


def test_detect_without_signal_returns_other():
    registry = build_registry()

    detection = registry.detect(["baking"], None)

    assert detection.primary == OTHER_DOMAIN
    assert detection.confidence == 0.0
    assert not detection.is_confident


def test_detect_ties_break_on_domain_key():
    registry = build_registry()

    detection = registry.detect(["linux"])

    assert detection.primary == "alpha"
    assert detection.secondary == "beta"


def test_detect_is_order_insensitive():
    registry = DomainRegistry.default()

    first = registry.detect(["react", "typescript", "docker"], "Frontend Developer")
    second = registry.detect(["docker", "TypeScript", "React"], "frontend   developer")

    assert first == second


def test_from_yaml_reads_rows(tmp_path: Path):
    path = tmp_path / "domains.yaml"
    path.write_text(
        "version: 7\n"
        "domains:\n"
        "  - domain_key: Alpha\n"
        "    primary_skills: [Rust, rust]\n"
        "    weight: 0.5\n",
        encoding="utf-8",
    )

    registry = DomainRegistry.from_yaml(path)

    assert registry.version == "7"
    domain = registry.get("alpha")
    assert isinstance(domain, TechDomain)
    assert domain.primary_skills == ["rust"]
    assert domain.weight == 0.5
