from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from talentmatch.schemas import (
    CandidateProfile,
    CommuteOverride,
    JobProfile,
    SalaryExpectation,
    TechDomain,
)


def test_candidate_profile_normalizes_tags():
    candidate = CandidateProfile(
        candidate_id="C-1",
        skills=["Python", " ", "", "SQL"],
        seniority="Principal",
        work_model="Fully_Remote",
        available_from="2025-02-01",
    )

    assert candidate.skills == ["Python", "SQL"]
    assert candidate.seniority == "lead"
    assert candidate.work_model == "remote"
    assert candidate.available_from == date(2025, 2, 1)
    assert candidate.commute.max_minutes is None


def test_unknown_seniority_becomes_unknown():
    candidate = CandidateProfile(candidate_id="C-1", seniority="wizard")

    assert candidate.seniority is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("remote-only", "remote"),
        ("Remote Only", "remote"),
        ("onsite-only", "onsite"),
        ("hybrid", "hybrid"),
        ("remote-first", None),
        ("part-time", None),
        ("  ", None),
    ],
)
def test_work_model_tags_normalize_or_become_unknown(raw, expected):
    assert CandidateProfile(candidate_id="C-1", work_model=raw).work_model == expected
    assert JobProfile(job_id="J-1", work_model=raw).work_model == expected


def test_language_entries_accept_code_and_camel_case_level():
    candidate = CandidateProfile(
        candidate_id="C-1",
        languages=[{"code": " DE ", "level": "C1"}, {"language": "en", "level": "fluent"}],
        certifications=["AWS Solutions Architect", " "],
    )
    job = JobProfile(job_id="J-1", required_languages=[{"code": "de", "minLevel": "B2"}])

    assert [(item.language, item.level) for item in candidate.languages] == [("de", "c1"), ("en", None)]
    assert candidate.certifications == ["AWS Solutions Architect"]
    assert job.required_languages[0].language == "de"
    assert job.required_languages[0].min_level == "b2"


def test_candidate_requires_identifier():
    with pytest.raises(ValidationError):
        CandidateProfile(skills=["python"])


def test_candidate_keeps_extra_fields():
    candidate = CandidateProfile(candidate_id="C-1", source="referral")

    assert candidate.model_dump()["source"] == "referral"


@pytest.mark.parametrize(
    ("salary", "minimum", "expectation"),
    [
        ({"expected": 70_000}, 70_000, 70_000),
        ({"minimum": 60_000, "maximum": 80_000}, 60_000, 70_000),
        ({"minimum": 60_000, "expected": 75_000}, 60_000, 75_000),
        ({"maximum": 90_000}, 90_000, 90_000),
    ],
)
def test_salary_expectation_views(salary: dict, minimum: int, expectation: int):
    expectation_model = SalaryExpectation(**salary)

    assert expectation_model.acceptable_minimum == minimum
    assert expectation_model.expectation == expectation
    assert not expectation_model.is_empty


def test_job_profile_swaps_inverted_ranges():
    job = JobProfile(job_id="J-1", experience_min=8, experience_max=3, salary_min=90_000, salary_max=70_000)

    assert (job.experience_min, job.experience_max) == (3, 8)
    assert (job.salary_min, job.salary_max) == (70_000, 90_000)


def test_job_remote_flag_implies_remote_work_model():
    job = JobProfile(job_id="J-1", remote=True)

    assert job.effective_work_model == "remote"
    assert job.is_remote
    assert JobProfile(job_id="J-2", work_model="On-Site").effective_work_model == "onsite"


def test_job_onsite_days_are_bounded():
    with pytest.raises(ValidationError):
        JobProfile(job_id="J-1", onsite_days_per_week=9)


def test_tech_domain_accepts_store_column_names():
    domain = TechDomain.model_validate(
        {
            "domain_key": " Backend_Cloud ",
            "primary_skills": ["Java", "java", "Spring  Boot"],
            "transferable_to": ["DevOps"],
            "weight": None,
            "active": None,
        }
    )

    assert domain.key == "backend_cloud"
    assert domain.primary_skills == ["java", "spring boot"]
    assert domain.transferable_to == ["devops"]
    assert domain.weight == 1.0
    assert domain.active is True


def test_commute_override_reads_store_rows():
    override = CommuteOverride.model_validate(
        {
            "candidate_id": "C-1",
            "job_id": "J-1",
            "accepted_commute_minutes": 70,
            "response": "yes",
            "responded_at": "2025-01-10T09:30:00+00:00",
            "response_notes": "Happy to drive twice a week",
        }
    )

    assert override.is_accepted
    assert override.notes == "Happy to drive twice a week"
    assert not CommuteOverride(candidate_id="C-1", job_id="J-1", response="conditional").is_accepted


def test_commute_override_rejects_unknown_response():
    with pytest.raises(ValidationError):
        CommuteOverride(candidate_id="C-1", job_id="J-1", response="maybe")
