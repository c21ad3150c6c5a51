from __future__ import annotations

import itertools

import pytest

from talentmatch.core import MatchEngine, PolicyClassifier
from talentmatch.core.registry import DomainRegistry
from talentmatch.schemas import CandidateProfile, CommuteEstimate, CommuteOverride, JobProfile
from talentmatch.schemas.config import ConfigurationError

REGISTRY = DomainRegistry.default()


def build_candidate(**overrides) -> CandidateProfile:
    data = {
        "candidate_id": "C-600",
        "skills": ["java", "spring", "aws"],
        "years_experience": 6,
        "seniority": "senior",
        "salary": {"expected": 70_000},
        "commute": {"max_minutes": 45},
    }
    data.update(overrides)
    return CandidateProfile(**data)


def build_job(**overrides) -> JobProfile:
    data = {
        "job_id": "J-600",
        "title": "Backend Engineer",
        "must_have_skills": ["java", "spring", "kubernetes"],
        "salary_min": 65_000,
        "salary_max": 85_000,
        "work_model": "onsite",
    }
    data.update(overrides)
    return JobProfile(**data)


def test_backend_candidate_with_transferable_skill_is_a_strong_match():
    result = MatchEngine().evaluate(build_candidate(), build_job(), REGISTRY, commute=CommuteEstimate(minutes=25))

    assert result.must_have_coverage == pytest.approx(0.83, abs=0.01)
    assert result.fit.details.skills.matched == ["java", "spring"]
    assert result.fit.details.skills.transferable == ["kubernetes"]
    assert result.constraints.breakdown.salary == 100
    assert result.policy in {"hot", "standard"}
    assert result.overall == 94
    assert result.version == "v3.1"


def test_incompatible_domains_hide_the_match():
    candidate = build_candidate(skills=["fpga", "vhdl", "firmware", "pcb"], current_title="Embedded Engineer")
    job = build_job(title="Product Designer", must_have_skills=["figma", "sketch", "prototyping"])

    result = MatchEngine().evaluate(candidate, job, REGISTRY, commute=CommuteEstimate(minutes=25))

    assert result.gates.domain_mismatch is not None
    assert result.gates.domain_mismatch.is_incompatible
    assert result.gate_multiplier <= 0.1
    assert result.policy == "hidden"


def test_job_without_must_haves_is_fully_covered():
    for skills in ([], ["cobol"], ["java", "react"]):
        result = MatchEngine().evaluate(build_candidate(skills=skills), build_job(must_have_skills=[]), REGISTRY)

        assert result.must_have_coverage == 1.0


def test_gate_dominance_ignores_thresholds():
    engine = MatchEngine(policy=PolicyClassifier(thresholds={"hot": 0, "standard": 0, "maybe": 0}))
    candidate = build_candidate(skills=["fpga", "vhdl"], domain="embedded_hardware")
    job = build_job(domain="design")

    result = engine.evaluate(candidate, job, REGISTRY)

    assert result.gates.domain_mismatch.is_incompatible
    assert result.policy == "hidden"


def test_evaluation_is_deterministic():
    engine = MatchEngine()
    candidate = build_candidate(available_from="2025-06-01", notice_period_days=30)
    job = build_job(start_by="2025-05-01", experience_min=8)

    first = engine.evaluate(candidate, job, REGISTRY, commute=CommuteEstimate(minutes=60))
    second = engine.evaluate(candidate, job, REGISTRY, commute=CommuteEstimate(minutes=60))

    assert first == second
    assert first.to_payload() == second.to_payload()


def test_accepted_override_forces_full_commute_score():
    override = CommuteOverride(candidate_id="C-600", job_id="J-600", accepted_commute_minutes=80, response="yes")

    result = MatchEngine().evaluate(
        build_candidate(), build_job(), REGISTRY, commute=CommuteEstimate(minutes=80), override=override
    )

    assert result.constraints.breakdown.commute == 100


def test_more_matched_must_haves_never_lower_skills_or_coverage():
    engine = MatchEngine()
    must = ["java", "spring", "kafka", "kubernetes", "graphql"]
    job = build_job(must_have_skills=must)

    previous_skills, previous_coverage = -1, -1.0
    for count in range(len(must) + 1):
        result = engine.evaluate(build_candidate(skills=must[:count]), job, REGISTRY)
        assert result.fit.breakdown.skills >= previous_skills
        assert result.must_have_coverage >= previous_coverage
        previous_skills = result.fit.breakdown.skills
        previous_coverage = result.must_have_coverage


def test_scores_stay_in_bounds_across_profiles():
    engine = MatchEngine()
    skill_sets = [[], ["java"], ["fpga", "vhdl"], ["figma", "ux"], ["java", "spring", "kubernetes", "kafka"]]
    salaries = [None, {"expected": 10_000}, {"minimum": 500_000}]
    seniorities = [None, "junior", "director"]
    work_models = [None, "remote", "onsite"]

    for skills, salary, seniority, work_model in itertools.product(skill_sets, salaries, seniorities, work_models):
        candidate = build_candidate(skills=skills, salary=salary, seniority=seniority, work_model=work_model)
        result = engine.evaluate(candidate, build_job(seniority="junior"), REGISTRY)

        assert 0 <= result.overall <= 100
        assert 0.0 <= result.must_have_coverage <= 1.0
        assert 0.0 <= result.gate_multiplier <= 1.0
        if result.gates.domain_mismatch and result.gates.domain_mismatch.is_incompatible:
            assert result.policy == "hidden"


def test_overall_is_blended_score_times_gate():
    candidate = build_candidate(work_model="remote")

    result = MatchEngine().evaluate(candidate, build_job(), REGISTRY, commute=CommuteEstimate(minutes=25))

    assert result.gates.dealbreakers.work_model == 0.25
    # blended 94 * 0.25
    assert result.overall == 24
    assert result.policy == "hidden"


def test_blend_weights_are_configurable():
    engine = MatchEngine(blend_weights={"fit": 1.0, "constraints": 0.0})

    result = engine.evaluate(build_candidate(salary=None), build_job(), REGISTRY)

    assert result.overall == result.fit.score


def test_invalid_blend_weights_fail_fast():
    with pytest.raises(ConfigurationError):
        MatchEngine(blend_weights={"fit": "most", "constraints": 0.3})


def test_unknown_domain_reference_skips_domain_rules():
    candidate = build_candidate(domain="quantum_computing")

    result = MatchEngine().evaluate(candidate, build_job(), REGISTRY, commute=CommuteEstimate(minutes=25))

    assert result.fit.details.skills.transferable == []
    assert result.fit.details.skills.must_have_missing == ["kubernetes"]
    assert result.gates.dealbreakers.tech_domain == 1.0
    assert "Unknown candidate domain 'quantum_computing'; domain rules skipped" in result.explainability.notes
    assert result.explainability.notes[0] in result.explainability.top_risks


def test_payload_uses_camel_case_wire_names():
    result = MatchEngine().evaluate(build_candidate(), build_job(), REGISTRY, commute=CommuteEstimate(minutes=25))

    payload = result.to_payload()

    assert payload["gateMultiplier"] == 1.0
    assert payload["mustHaveCoverage"] == pytest.approx(0.833333)
    assert set(payload["constraints"]["breakdown"]) == {"salary", "commute", "startDate"}
    assert set(payload["gates"]["dealbreakers"]) == {"salary", "startDate", "seniority", "workModel", "techDomain"}
    assert payload["fit"]["details"]["skills"]["mustHaveMissing"] == []
    assert payload["explainability"]["kind"] == "enhanced"
    assert "recruiterAction" in payload["explainability"]


def test_failed_eligibility_rule_hides_the_match_in_every_mode():
    engine = MatchEngine()
    job = build_job(required_certifications=["CKA"])

    exact = engine.evaluate(build_candidate(), job, REGISTRY, commute=CommuteEstimate(minutes=25))
    preview = engine.evaluate(build_candidate(), job, REGISTRY, commute=CommuteEstimate(minutes=25), mode="preview")

    for result in (exact, preview):
        assert result.overall == 0
        assert result.gate_multiplier == 0.0
        assert result.policy == "hidden"
        assert result.explainability.why_not == "Certification CKA missing"
        assert result.explainability.top_risks[0] == "Certification CKA missing"
        assert result.explainability.enhanced_risks[0].category == "eligibility"
    payload = exact.to_payload()
    assert payload["gates"]["hardKill"] == {"category": "license", "reason": "Certification CKA missing"}
    assert payload["fit"]["score"] == exact.fit.score


def test_unrecognized_work_models_still_produce_a_result():
    result = MatchEngine().evaluate(
        CandidateProfile(candidate_id="C-1", work_model="remote-first"),
        JobProfile(job_id="J-1", work_model="part-time"),
        REGISTRY,
    )

    assert result.gates.dealbreakers.work_model == 1.0
    assert "hardKill" not in result.to_payload()["gates"]
