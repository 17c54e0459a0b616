"""
Dimension scorers.

Each scorer consumes a :class:`NormalizedCandidate` and returns one
:class:`DimensionScore` on a 0..100 scale together with a confidence in
0..1.  Missing data never removes a dimension: the scorer returns its
fallback value with zero confidence so that every candidate is scored on
the same four axes.

Price and delivery treat silence as neutral (50).  Skills treat silence
as a real negative signal (0) whenever the job lists skills.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from ..config import RankingConfig
from ..normalize.fields import NormalizedCandidate
from ..normalize.schema import DimensionScore
from .llm_schema import ExperienceAssessment

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50.0

REQUIRED_SKILLS_SHARE = 0.7
NICE_TO_HAVE_SHARE = 0.3

INTERVIEW_WEIGHT = 0.5
SCREENING_WEIGHT = 0.3
BASE_EVIDENCE_WEIGHT = 0.2


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def price_curve(price: float, band: Tuple[float, float], config: RankingConfig) -> float:
    """Map a price onto 0..100 against the job's budget band.

    The curve is piecewise linear and strictly decreasing up to the
    ceiling: 100 at a price of zero, ``price_at_min_score`` at the band
    floor and ``price_at_max_score`` at the ceiling.  Without a floor the
    middle point is dropped.  Above the ceiling the score drops by
    ``overage_penalty`` points per 100% overage.
    """
    lo, hi = band
    if hi <= 0:
        return 100.0 if price <= 0 else 0.0
    if price > hi:
        overage = (price - hi) / hi
        return _clamp(config.price_at_max_score - config.overage_penalty * overage)
    if lo > 0 and price <= lo:
        return _clamp(100.0 - (100.0 - config.price_at_min_score) * price / lo)
    start = config.price_at_min_score if lo > 0 else 100.0
    position = (price - lo) / (hi - lo)
    return _clamp(start - (start - config.price_at_max_score) * position)


def score_price(norm: NormalizedCandidate, config: RankingConfig) -> DimensionScore:
    if norm.price is None or norm.budget_band is None:
        return DimensionScore("price", NEUTRAL_SCORE, 0.0)
    return DimensionScore("price", price_curve(norm.price, norm.budget_band, config), 1.0)


def score_delivery(norm: NormalizedCandidate) -> DimensionScore:
    """Linear decay: 100 at zero days, 50 at the window, 0 at twice the window."""
    if norm.delivery_days is None:
        return DimensionScore("delivery", NEUTRAL_SCORE, 0.0)
    score = 100.0 * (1.0 - norm.delivery_days / (2.0 * norm.delivery_window))
    return DimensionScore("delivery", _clamp(score), 1.0)


def score_skills(norm: NormalizedCandidate) -> DimensionScore:
    overlap = norm.skills
    if overlap.required_total == 0 and overlap.nice_total == 0:
        return DimensionScore("skillsMatch", NEUTRAL_SCORE, 0.0)
    if not overlap.has_skills:
        return DimensionScore("skillsMatch", 0.0, 0.0)
    required_ratio = len(overlap.required_matched) / max(1, overlap.required_total)
    nice_ratio = len(overlap.nice_matched) / max(1, overlap.nice_total)
    if overlap.required_total == 0:
        score = 100.0 * nice_ratio
    elif overlap.nice_total == 0:
        score = 100.0 * required_ratio
    else:
        score = 100.0 * (REQUIRED_SKILLS_SHARE * required_ratio + NICE_TO_HAVE_SHARE * nice_ratio)
    return DimensionScore("skillsMatch", _clamp(score), 1.0)


def _base_evidence(
    norm: NormalizedCandidate, assessment: Optional[ExperienceAssessment]
) -> Tuple[float, float]:
    """Average the prior rating and the text assessment, whichever exist."""
    parts: List[Tuple[float, float]] = []
    if norm.experience.prior_rating is not None:
        parts.append((norm.experience.prior_rating * 20.0, 1.0))
    if assessment is not None and assessment.confidence > 0:
        parts.append((assessment.score, assessment.confidence))
    if not parts:
        return NEUTRAL_SCORE, 0.0
    score = sum(p[0] for p in parts) / len(parts)
    confidence = sum(p[1] for p in parts) / len(parts)
    return score, confidence


def score_experience(
    norm: NormalizedCandidate, assessment: Optional[ExperienceAssessment]
) -> DimensionScore:
    """Blend later-funnel scores with the base evidence.

    Interview and screening scores dominate when present
    (0.5 / 0.3 / 0.2); missing stage scores drop out and the remaining
    weights are renormalised.
    """
    base_score, base_conf = _base_evidence(norm, assessment)
    blend: List[Tuple[float, float, float]] = [(BASE_EVIDENCE_WEIGHT, base_score, base_conf)]
    if norm.experience.interview_score is not None:
        blend.append((INTERVIEW_WEIGHT, norm.experience.interview_score, 1.0))
    if norm.experience.screening_score is not None:
        blend.append((SCREENING_WEIGHT, norm.experience.screening_score, 1.0))
    total = sum(w for w, _, _ in blend)
    score = sum(w * s for w, s, _ in blend) / total
    confidence = sum(w * c for w, _, c in blend) / total
    return DimensionScore("experience", _clamp(score), confidence)


def score_dimensions(
    norm: NormalizedCandidate,
    assessment: Optional[ExperienceAssessment],
    config: RankingConfig,
) -> Dict[str, DimensionScore]:
    """Compute all four dimension scores for one candidate."""
    scores = {
        "price": score_price(norm, config),
        "delivery": score_delivery(norm),
        "skillsMatch": score_skills(norm),
        "experience": score_experience(norm, assessment),
    }
    logger.debug(
        "Candidate %s scored %s",
        norm.candidate.id,
        {name: round(s.score, 2) for name, s in scores.items()},
    )
    return scores
