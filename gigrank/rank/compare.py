"""
Cohort comparison.

Derives structured, cohort-relative facts for every ranked candidate:
for each dimension, whether the candidate sits above or below the
cohort median and by how much.  In a cohort of at least
``std_cohort_size`` candidates the magnitude is measured in standard
deviations; smaller cohorts use rank terciles instead.  Only candidates
with real data for a dimension (confidence above zero) take part in
that dimension's median, deviation and ranks.

The facts are selected into strengths and weaknesses here; turning them
into prose is the job of the text collaborator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from ..config import RankingConfig
from ..normalize.fields import coerce_number
from ..normalize.schema import DIMENSIONS, Fact
from .aggregate import ScoredCandidate

logger = logging.getLogger(__name__)

_EPSILON = 1e-9

_STRONG_MAGNITUDES = ("significant", "moderate")
_MAGNITUDE_ORDER = {
    "significant": 0,
    "top_third": 1,
    "bottom_third": 1,
    "moderate": 2,
    "absent": 3,
    "middle_third": 4,
    "slight": 5,
}

CATEGORY_LEADER_KEYS = {
    "price": "best_price",
    "delivery": "fastest_delivery",
    "skillsMatch": "strongest_skills",
    "experience": "most_experienced",
}


@dataclass
class CandidateFacts:
    facts: List[Fact] = field(default_factory=list)
    strengths: List[Fact] = field(default_factory=list)
    weaknesses: List[Fact] = field(default_factory=list)


def _tercile(position: int, count: int) -> str:
    """Tercile of a 0-based competition rank among ``count`` values."""
    percentile = position / (count - 1)
    if percentile < 1 / 3:
        return "top_third"
    if percentile > 2 / 3:
        return "bottom_third"
    return "middle_third"


def _deviation_magnitude(value: float, median: float, std: float) -> str:
    if std <= _EPSILON:
        return "slight"
    deviation = abs(value - median) / std
    if deviation >= 1.0:
        return "significant"
    if deviation >= 0.5:
        return "moderate"
    return "slight"


def _dimension_facts(
    dimension: str,
    entries: List[ScoredCandidate],
    config: RankingConfig,
) -> Dict[str, Fact]:
    reporting = [e for e in entries if e.dimension_scores[dimension].confidence > 0]
    if len(reporting) < 2:
        return {}
    values = np.array([e.dimension_scores[dimension].score for e in reporting], dtype=float)
    median = float(np.median(values))
    std = float(np.std(values))
    use_std = len(entries) >= config.std_cohort_size
    facts: Dict[str, Fact] = {}
    for entry, value in zip(reporting, values):
        if value > median + _EPSILON:
            relation = "above_median"
        elif value < median - _EPSILON:
            relation = "below_median"
        else:
            relation = "at_median"
        if use_std:
            magnitude = _deviation_magnitude(float(value), median, std)
        else:
            position = int(np.sum(values > value + _EPSILON))
            magnitude = _tercile(position, len(reporting))
        facts[entry.candidate.id] = Fact(dimension, relation, magnitude)
    return facts


def _is_strength(fact: Fact) -> bool:
    return fact.relation == "above_median" and (
        fact.magnitude in _STRONG_MAGNITUDES or fact.magnitude == "top_third"
    )


def _is_weakness(fact: Fact) -> bool:
    return fact.relation == "below_median" and (
        fact.magnitude in _STRONG_MAGNITUDES or fact.magnitude == "bottom_third"
    )


def _fact_order(fact: Fact) -> tuple:
    return (_MAGNITUDE_ORDER.get(fact.magnitude, 9), DIMENSIONS.index(fact.dimension))


def compare_cohort(
    entries: List[ScoredCandidate],
    config: RankingConfig,
    job_has_skills: bool,
) -> Dict[str, CandidateFacts]:
    """Return facts, strengths and weaknesses keyed by candidate id.

    Args:
        entries: Candidates in ranking order.
        config: Ranking configuration (cohort size for std-based magnitudes).
        job_has_skills: Whether the job lists any skills; when it does, a
            candidate who listed none gets a ``not_reported`` weakness.
    """
    per_dimension = {dim: _dimension_facts(dim, entries, config) for dim in DIMENSIONS}
    results: Dict[str, CandidateFacts] = {}
    for entry in entries:
        cid = entry.candidate.id
        facts = [per_dimension[dim][cid] for dim in DIMENSIONS if cid in per_dimension[dim]]
        strengths = sorted((f for f in facts if _is_strength(f)), key=_fact_order)
        weaknesses = [f for f in facts if _is_weakness(f)]
        skills = entry.dimension_scores["skillsMatch"]
        if job_has_skills and skills.confidence == 0:
            missing = Fact("skillsMatch", "not_reported", "absent")
            facts.append(missing)
            weaknesses.append(missing)
        results[cid] = CandidateFacts(
            facts=facts,
            strengths=strengths,
            weaknesses=sorted(weaknesses, key=_fact_order),
        )
    logger.debug("Compared %d candidates across %d dimensions", len(entries), len(DIMENSIONS))
    return results


def _leader(entries: List[ScoredCandidate], values: List[Optional[float]]) -> Optional[str]:
    best_id: Optional[str] = None
    best_value: Optional[float] = None
    for entry, value in zip(entries, values):
        if value is None:
            continue
        if best_value is None or value > best_value + _EPSILON:
            best_id, best_value = entry.candidate.id, value
    return best_id


def category_leaders(entries: List[ScoredCandidate]) -> Dict[str, str]:
    """Best candidate per category; ties go to the better-ranked candidate."""
    leaders: Dict[str, str] = {}
    if not entries:
        return leaders
    for dimension, key in CATEGORY_LEADER_KEYS.items():
        values = [
            e.dimension_scores[dimension].score if e.dimension_scores[dimension].confidence > 0 else None
            for e in entries
        ]
        leader = _leader(entries, values)
        if leader is not None:
            leaders[key] = leader
    screening = _leader(
        entries, [coerce_number(e.candidate.screening_score, 0, 100) for e in entries]
    )
    if screening is not None:
        leaders["highest_screening"] = screening
    interview = _leader(
        entries, [coerce_number(e.candidate.interview_score, 0, 100) for e in entries]
    )
    if interview is not None:
        leaders["best_interview"] = interview
    leaders["highest_composite"] = entries[0].candidate.id
    return leaders
