"""
Score aggregation for ranking.

Combines the four dimension scores of each candidate into a composite
score using configurable weights, then sorts the cohort into a strict
total order.  Composite scores keep full precision here; rounding
happens only when results are emitted.

Ordering is by composite score (descending), then skills-match score
(descending), then submission time (earliest first), then candidate id
(ascending).  Positions are assigned 1..N with no gaps or shared
positions.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Tuple

from ..normalize.schema import CandidateInput, DimensionScore

logger = logging.getLogger(__name__)


@dataclass
class ScoredCandidate:
    candidate: CandidateInput
    dimension_scores: Dict[str, DimensionScore]
    composite: float
    ranking_position: int = 0

    @property
    def composite_rounded(self) -> int:
        return round_score(self.composite)


def round_score(value: float) -> int:
    """Round half up (scores are never negative)."""
    return int(math.floor(value + 0.5))


def composite_score(dimension_scores: Dict[str, DimensionScore], weights: Dict[str, float]) -> float:
    """Weighted mean of the dimension scores.

    Dimensions with zero confidence take part at their fallback value.
    """
    total_weight = sum(weights.values())
    weighted = sum(
        weight * dimension_scores[name].score
        for name, weight in weights.items()
    )
    return weighted / total_weight


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _sort_key(entry: ScoredCandidate) -> Tuple[float, float, datetime, str]:
    return (
        -entry.composite,
        -entry.dimension_scores["skillsMatch"].score,
        _utc(entry.candidate.submitted_at),
        entry.candidate.id,
    )


def aggregate_scores(
    scored: Iterable[Tuple[CandidateInput, Dict[str, DimensionScore]]],
    weights: Dict[str, float],
) -> List[ScoredCandidate]:
    """Compute composite scores and return candidates in ranking order.

    Args:
        scored: Tuples of (candidate, dimension scores).
        weights: Dimension weights; need not sum to 1.

    Returns:
        ``ScoredCandidate`` objects sorted best first, with
        ``ranking_position`` set to 1..N.
    """
    aggregated = [
        ScoredCandidate(
            candidate=candidate,
            dimension_scores=dimension_scores,
            composite=composite_score(dimension_scores, weights),
        )
        for candidate, dimension_scores in scored
    ]
    aggregated.sort(key=_sort_key)
    for position, entry in enumerate(aggregated, start=1):
        entry.ranking_position = position
    logger.debug("Aggregated scores for %d candidates", len(aggregated))
    return aggregated
