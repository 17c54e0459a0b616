"""Tests for cohort comparison facts and category leaders."""

from __future__ import annotations

from datetime import timedelta
from typing import Dict, List

from gigrank.config import RankingConfig
from gigrank.normalize.schema import CandidateInput, DimensionScore, Fact
from gigrank.rank.aggregate import ScoredCandidate, aggregate_scores
from gigrank.rank.compare import category_leaders, compare_cohort

from helpers import BASE_TIME, dims

CONFIG = RankingConfig()


def _entries(rows: Dict[str, Dict[str, DimensionScore]], **extra: Dict[str, object]) -> List[ScoredCandidate]:
    scored = []
    for i, (cid, scores) in enumerate(rows.items()):
        candidate = CandidateInput(
            id=cid,
            submitted_at=BASE_TIME + timedelta(minutes=i),
            **extra.get(cid, {}),  # type: ignore[arg-type]
        )
        scored.append((candidate, scores))
    return aggregate_scores(scored, CONFIG.weights)


def test_small_cohort_uses_terciles() -> None:
    entries = _entries({"a": dims(price=90), "b": dims(price=60), "c": dims(price=30)})
    facts = compare_cohort(entries, CONFIG, job_has_skills=False)

    assert facts["a"].facts == [Fact("price", "above_median", "top_third")]
    assert facts["b"].facts == [Fact("price", "at_median", "middle_third")]
    assert facts["c"].facts == [Fact("price", "below_median", "bottom_third")]
    assert [str(f) for f in facts["a"].strengths] == ["price:above_median:top_third"]
    assert facts["b"].strengths == [] and facts["b"].weaknesses == []
    assert [str(f) for f in facts["c"].weaknesses] == ["price:below_median:bottom_third"]


def test_large_cohort_uses_standard_deviations() -> None:
    entries = _entries(
        {
            "a": dims(skillsMatch=100),
            "b": dims(skillsMatch=80),
            "c": dims(skillsMatch=60),
            "d": dims(skillsMatch=40),
            "e": dims(skillsMatch=0),
        }
    )
    facts = compare_cohort(entries, CONFIG, job_has_skills=True)

    assert facts["a"].strengths == [Fact("skillsMatch", "above_median", "significant")]
    assert facts["b"].strengths == [Fact("skillsMatch", "above_median", "moderate")]
    assert facts["c"].facts == [Fact("skillsMatch", "at_median", "slight")]
    assert facts["d"].weaknesses == [Fact("skillsMatch", "below_median", "moderate")]
    assert facts["e"].weaknesses == [Fact("skillsMatch", "below_median", "significant")]


def test_cohort_size_not_reporting_count_selects_std() -> None:
    entries = _entries(
        {
            "a": dims(price=100),
            "b": dims(price=80),
            "c": dims(price=60),
            "d": dims(price=0),
            "e": dims(),
            "f": dims(),
        }
    )
    facts = compare_cohort(entries, CONFIG, job_has_skills=False)

    # six candidates, four quoted a price: median 70, std about 37.4
    assert facts["a"].facts == [Fact("price", "above_median", "moderate")]
    assert facts["d"].weaknesses == [Fact("price", "below_median", "significant")]
    assert facts["e"].facts == []

def test_missing_data_is_excluded_from_statistics() -> None:
    entries = _entries({"a": dims(price=90), "b": dims(price=30), "c": dims()})
    facts = compare_cohort(entries, CONFIG, job_has_skills=False)
    assert facts["c"].facts == []
    assert facts["a"].facts == [Fact("price", "above_median", "top_third")]


def test_single_candidate_has_no_relative_facts() -> None:
    entries = _entries({"solo": dims(price=90, delivery=80, skillsMatch=70, experience=60)})
    facts = compare_cohort(entries, CONFIG, job_has_skills=True)
    assert facts["solo"].facts == []
    assert facts["solo"].strengths == []


def test_unreported_skills_become_a_weakness() -> None:
    entries = _entries({"a": dims(skillsMatch=100), "b": dims()})
    facts = compare_cohort(entries, CONFIG, job_has_skills=True)
    assert Fact("skillsMatch", "not_reported", "absent") in facts["b"].weaknesses

    no_skill_job = compare_cohort(entries, CONFIG, job_has_skills=False)
    assert no_skill_job["b"].weaknesses == []


def test_category_leaders() -> None:
    entries = _entries(
        {
            "a": dims(price=40, delivery=90, skillsMatch=100, experience=70),
            "b": dims(price=95, delivery=60, skillsMatch=50, experience=80),
            "c": dims(price=70, skillsMatch=20),
        },
        b={"screening_score": 75, "interview_score": 60},
        c={"interview_score": 88},
    )
    leaders = category_leaders(entries)

    assert leaders["best_price"] == "b"
    assert leaders["fastest_delivery"] == "a"
    assert leaders["strongest_skills"] == "a"
    assert leaders["most_experienced"] == "b"
    assert leaders["highest_screening"] == "b"
    assert leaders["best_interview"] == "c"
    assert leaders["highest_composite"] == entries[0].candidate.id


def test_category_leaders_skip_unreported_dimensions() -> None:
    entries = _entries({"a": dims(price=60), "b": dims(price=50)})
    leaders = category_leaders(entries)
    assert "fastest_delivery" not in leaders
    assert "highest_screening" not in leaders
    assert leaders["best_price"] == "a"
