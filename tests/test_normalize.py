"""Tests for field normalisation and the mapping loaders."""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path

import pytest  # type: ignore

from gigrank.errors import InvalidInput
from gigrank.normalize.fields import budget_band, normalize_candidate, normalize_skill
from gigrank.normalize.loaders import candidate_from_dict, job_spec_from_dict, load_candidates
from gigrank.normalize.schema import Budget, ExperienceLevel, JobSpec


def test_normalize_skill_trims_and_lowercases() -> None:
    assert normalize_skill("  Machine   Learning ") == "machine learning"
    assert normalize_skill("   ") is None
    assert normalize_skill(42) is None


def test_malformed_fields_degrade_to_absent(make_candidate, django_job) -> None:
    candidate = make_candidate(
        "c1",
        proposed_price="not a number",
        proposed_delivery_days=-3,
        prior_rating=7,
        screening_score=float("nan"),
        interview_score=True,
        skills="python",
        portfolio_links="https://example.com",
    )
    norm = normalize_candidate(candidate, django_job, 90)
    assert norm.price is None
    assert norm.delivery_days is None
    assert norm.experience.prior_rating is None
    assert norm.experience.screening_score is None
    assert norm.experience.interview_score is None
    assert norm.skills.has_skills is False
    assert norm.experience.portfolio_count == 0


def test_numeric_strings_are_accepted(make_candidate, django_job) -> None:
    norm = normalize_candidate(
        make_candidate("c1", proposed_price="1 500", prior_rating="4.5"), django_job, 90
    )
    assert norm.price == 1500.0
    assert norm.experience.prior_rating == 4.5


def test_unknown_skills_kept_for_display_only(make_candidate, django_job) -> None:
    norm = normalize_candidate(
        make_candidate("c1", skills=["Python, Rust", " DJANGO "]), django_job, 90
    )
    assert norm.skills_display == ["Python, Rust", "DJANGO"]
    assert norm.skills.required_matched == {"python", "django"}
    assert norm.skills.unmatched == ["rust"]


def test_budget_band_variants() -> None:
    assert budget_band(Budget()) is None
    assert budget_band(Budget(min=1000, max=2000)) == (1000.0, 2000.0)
    assert budget_band(Budget(max=2000)) == (0.0, 2000.0)
    assert budget_band(Budget(min=1000)) == (1000.0, 2000.0)


def test_delivery_window_uses_submission_date(make_candidate) -> None:
    job = JobSpec(title="t", deadline=date(2026, 10, 11))
    norm = normalize_candidate(make_candidate("c1", proposed_delivery_days=5), job, 90)
    assert norm.delivery_window == 10.0
    late_job = JobSpec(title="t", deadline=date(2026, 9, 1))
    assert normalize_candidate(make_candidate("c2"), late_job, 90).delivery_window == 1.0


def test_candidate_from_dict_accepts_camel_case() -> None:
    candidate = candidate_from_dict(
        {
            "id": "r1",
            "proposedPrice": 1200,
            "proposedDeliveryDays": 4,
            "coverLetter": "Hello",
            "experience": "5 years",
            "rating": "4.2",
            "createdAt": "2026-10-01T09:30:00Z",
        }
    )
    assert candidate.proposed_price == 1200
    assert candidate.cover_letter_text == "Hello"
    assert candidate.experience_text == "5 years"
    assert candidate.prior_rating == "4.2"
    assert candidate.submitted_at.tzinfo is not None


def test_candidate_from_dict_requires_id_and_timestamp() -> None:
    with pytest.raises(InvalidInput):
        candidate_from_dict({"submittedAt": "2026-10-01"})
    with pytest.raises(InvalidInput):
        candidate_from_dict({"id": "r1", "submittedAt": "yesterday"})


def test_job_spec_from_dict_flat_budget() -> None:
    job = job_spec_from_dict(
        {
            "id": "gig-9",
            "title": "Landing page",
            "requiredSkills": ["html", "css"],
            "niceToHaveSkills": "figma",
            "experienceLevel": "Senior",
            "budgetMin": 300,
            "budgetMax": 500,
            "deadline": "2026-12-01",
        }
    )
    assert job.job_id == "gig-9"
    assert job.required_skills == {"html", "css"}
    assert job.nice_to_have_skills == {"figma"}
    assert job.experience_level is ExperienceLevel.SENIOR
    assert job.budget == Budget(min=300, max=500)
    assert job.deadline == date(2026, 12, 1)


def test_load_candidates_from_wrapped_json(tmp_path: Path) -> None:
    path = tmp_path / "candidates.json"
    path.write_text(
        json.dumps({"candidates": [{"id": "a", "submitted_at": "2026-10-01T10:00:00"}]}),
        encoding="utf-8",
    )
    candidates = load_candidates(str(path))
    assert [c.id for c in candidates] == ["a"]
    assert candidates[0].submitted_at == datetime(2026, 10, 1, 10, 0)
