"""
Recommendation tiers.

Maps a candidate's rounded composite score onto a recommendation tier
using the configured thresholds.  A skills-match score below the
configured floor caps the tier at ``NEUTRAL`` so that strong price or
delivery numbers cannot hide an unmet core requirement.
"""

from __future__ import annotations

from typing import Dict

from ..config import RankingConfig
from ..normalize.schema import DimensionScore, Recommendation

_TIER_ORDER = [
    Recommendation.NOT_RECOMMENDED,
    Recommendation.NEUTRAL,
    Recommendation.RECOMMENDED,
    Recommendation.HIGHLY_RECOMMENDED,
]


def tier_rank(recommendation: Recommendation) -> int:
    """Return 0 (worst) .. 3 (best) for a recommendation tier."""
    return _TIER_ORDER.index(recommendation)


def classify(
    composite: int,
    dimension_scores: Dict[str, DimensionScore],
    config: RankingConfig,
) -> Recommendation:
    thresholds = config.thresholds
    if composite >= thresholds.highly_recommended:
        tier = Recommendation.HIGHLY_RECOMMENDED
    elif composite >= thresholds.recommended:
        tier = Recommendation.RECOMMENDED
    elif composite >= thresholds.neutral:
        tier = Recommendation.NEUTRAL
    else:
        tier = Recommendation.NOT_RECOMMENDED
    skills = dimension_scores.get("skillsMatch")
    if skills is not None and skills.score < config.skills_floor:
        if tier_rank(tier) > tier_rank(Recommendation.NEUTRAL):
            tier = Recommendation.NEUTRAL
    return tier
