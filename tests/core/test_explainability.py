from __future__ import annotations

from talentmatch.core import MatchEngine
from talentmatch.core.registry import DomainRegistry
from talentmatch.schemas import (
    BasicExplainability,
    CandidateProfile,
    CommuteEstimate,
    CommuteOverride,
    EnhancedExplainability,
    JobProfile,
)

REGISTRY = DomainRegistry.default()


def build_candidate(**overrides) -> CandidateProfile:
    data = {
        "candidate_id": "C-500",
        "skills": ["java", "spring", "aws"],
        "years_experience": 6,
        "seniority": "senior",
        "salary": {"expected": 70_000},
    }
    data.update(overrides)
    return CandidateProfile(**data)


def build_job(**overrides) -> JobProfile:
    data = {
        "job_id": "J-500",
        "must_have_skills": ["java", "spring", "kubernetes"],
        "salary_min": 65_000,
        "salary_max": 85_000,
    }
    data.update(overrides)
    return JobProfile(**data)


def test_hot_match_explains_strengths_and_recommends_proceeding():
    result = MatchEngine().evaluate(build_candidate(), build_job(), REGISTRY, commute=CommuteEstimate(minutes=20))

    explain = result.explainability
    assert isinstance(explain, EnhancedExplainability)
    assert result.policy == "hot"
    assert explain.top_reasons[0] == "2 direct skill matches: java, spring"
    assert "1 transferable skills: kubernetes" in explain.top_reasons
    assert explain.top_risks == []
    assert explain.why_not is None
    assert explain.next_action == "Invite to interview immediately"
    assert explain.recruiter_action.recommendation == "proceed"
    assert explain.recruiter_action.priority == "high"
    assert explain.recruiter_action.next_steps[0] == "Contact within 24 hours"


def test_incompatible_domain_is_the_leading_risk_and_why_not():
    candidate = build_candidate(skills=["fpga", "vhdl", "firmware"], current_title="Embedded Engineer")
    job = build_job(must_have_skills=["figma", "ux", "prototyping"], title="UX Designer")

    result = MatchEngine().evaluate(candidate, job, REGISTRY, commute=CommuteEstimate(minutes=20))

    explain = result.explainability
    assert result.policy == "hidden"
    assert explain.why_not == "Incompatible domains: Embedded/Hardware vs Design/UX"
    assert explain.top_risks[0] == "Technology mismatch: Embedded/Hardware -> Design/UX"
    assert explain.enhanced_risks[0].severity == "critical"
    assert not explain.enhanced_risks[0].mitigatable
    assert explain.recruiter_action.recommendation == "skip"
    assert explain.next_action == "Do not show"


def test_hidden_by_work_model_gate_names_the_gate():
    candidate = build_candidate(skills=["python", "django"], work_model="remote")
    job = build_job(must_have_skills=["python", "django"], work_model="onsite")

    result = MatchEngine().evaluate(candidate, job, REGISTRY, commute=CommuteEstimate(minutes=10))

    assert result.policy == "hidden"
    assert result.explainability.why_not == "Candidate is remote-only, role is onsite"
    assert "Candidate is remote-only, role is onsite" in result.explainability.top_risks


def test_hidden_by_low_coverage_reports_the_shortfall():
    candidate = build_candidate(skills=["cobol"], years_experience=0, seniority=None, salary=None)
    job = build_job(must_have_skills=["java", "spring", "kafka"], experience_min=5, salary_min=None, salary_max=None)

    result = MatchEngine().evaluate(candidate, job, REGISTRY)

    assert result.policy == "hidden"
    assert result.explainability.why_not == "Must-have coverage only 0%"
    assert "Missing data: Travel time unknown" in result.explainability.notes


def test_missing_data_is_noted_and_tagged_as_risk():
    candidate = build_candidate(salary=None)

    result = MatchEngine().evaluate(candidate, build_job(), REGISTRY, commute=CommuteEstimate(minutes=20))

    explain = result.explainability
    assert result.constraints.breakdown.salary == 50
    assert "Missing data: Salary expectation unknown" in explain.notes
    data_risks = [risk for risk in explain.enhanced_risks if risk.category == "data"]
    assert data_risks
    assert data_risks[0].mitigatable
    assert data_risks[0].mitigation


def test_declined_override_is_surfaced_without_changing_score():
    candidate = build_candidate(commute={"max_minutes": 30})
    override = CommuteOverride(candidate_id="C-500", job_id="J-500", response="no")

    declined = MatchEngine().evaluate(
        candidate, build_job(), REGISTRY, commute=CommuteEstimate(minutes=45), override=override
    )
    plain = MatchEngine().evaluate(candidate, build_job(), REGISTRY, commute=CommuteEstimate(minutes=45))

    assert declined.constraints.breakdown.commute == plain.constraints.breakdown.commute
    assert "Candidate declined this commute" in declined.explainability.top_risks


def test_mitigatable_risks_carry_a_mitigation():
    candidate = build_candidate(salary={"expected": 90_000}, commute={"max_minutes": 30})
    job = build_job(must_have_skills=["java", "spring", "kafka"])

    result = MatchEngine().evaluate(candidate, job, REGISTRY, commute=CommuteEstimate(minutes=45))

    risks = result.explainability.enhanced_risks
    assert risks
    for risk in risks:
        if risk.mitigatable and risk.category != "data":
            assert risk.mitigation


def test_basic_variant_omits_enhanced_fields():
    engine = MatchEngine(explain="basic")

    result = engine.evaluate(build_candidate(), build_job(), REGISTRY, commute=CommuteEstimate(minutes=20))

    assert isinstance(result.explainability, BasicExplainability)
    assert result.explainability.kind == "basic"
    payload = result.to_payload()["explainability"]
    assert "enhancedReasons" not in payload
    assert "recruiterAction" not in payload
