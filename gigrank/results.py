"""
Ranking result export and filtering.

Helpers for consumers of a :class:`RankingResult`: conversion to plain
dictionaries and JSON, a flat pandas DataFrame/CSV view with one row per
candidate, and the listing filter used when displaying stored rankings
(minimum score, recommendation tier, limit and offset).  None of these
functions is used by the ranking engine itself.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd

from .normalize.schema import (
    DIMENSIONS,
    DimensionScore,
    Fact,
    RankedCandidate,
    RankingResult,
    Recommendation,
)

logger = logging.getLogger(__name__)


def candidate_to_dict(candidate: RankedCandidate) -> Dict[str, Any]:
    return {
        "candidate_id": candidate.candidate_id,
        "candidate_name": candidate.candidate_name,
        "ranking_position": candidate.ranking_position,
        "composite_score": candidate.composite_score,
        "recommendation": candidate.recommendation.value,
        "dimension_scores": {
            name: {"score": round(s.score, 4), "confidence": round(s.confidence, 4)}
            for name, s in candidate.dimension_scores.items()
        },
        "strengths": list(candidate.strengths),
        "weaknesses": list(candidate.weaknesses),
        "actionable_insights": list(candidate.actionable_insights),
        "facts": [str(f) for f in candidate.facts],
        "analysis": candidate.analysis,
        "explanation_source": candidate.explanation_source,
    }


def result_to_dict(result: RankingResult) -> Dict[str, Any]:
    return {
        "job_id": result.job_id,
        "ranked_at": result.ranked_at.isoformat(),
        "total_count": result.total_count,
        "category_leaders": dict(result.category_leaders),
        "candidates": [candidate_to_dict(c) for c in result.candidates],
    }


def _fact_from_token(token: str) -> Fact:
    dimension, relation, magnitude = token.split(":", 2)
    return Fact(dimension, relation, magnitude)


def result_from_dict(data: Dict[str, Any]) -> RankingResult:
    """Rebuild a :class:`RankingResult` from :func:`result_to_dict` output."""
    candidates: List[RankedCandidate] = []
    for item in data.get("candidates", []):
        scores = {
            name: DimensionScore(name, float(s["score"]), float(s["confidence"]))
            for name, s in item.get("dimension_scores", {}).items()
        }
        candidates.append(
            RankedCandidate(
                candidate_id=item["candidate_id"],
                dimension_scores=scores,
                composite_score=int(item["composite_score"]),
                ranking_position=int(item["ranking_position"]),
                recommendation=Recommendation(item["recommendation"]),
                strengths=list(item.get("strengths", [])),
                weaknesses=list(item.get("weaknesses", [])),
                actionable_insights=list(item.get("actionable_insights", [])),
                facts=[_fact_from_token(t) for t in item.get("facts", [])],
                analysis=item.get("analysis", ""),
                explanation_source=item.get("explanation_source", "heuristic"),
                raw_composite=float(item["composite_score"]),
                candidate_name=item.get("candidate_name"),
            )
        )
    return RankingResult(
        candidates=candidates,
        ranked_at=datetime.fromisoformat(data["ranked_at"]),
        job_id=data.get("job_id"),
        total_count=int(data.get("total_count", len(candidates))),
        category_leaders=dict(data.get("category_leaders", {})),
    )


def results_to_frame(result: RankingResult) -> pd.DataFrame:
    """Flatten a ranking into one row per candidate."""
    rows = []
    for c in result.candidates:
        row: Dict[str, Any] = {
            "ranking_position": c.ranking_position,
            "candidate_id": c.candidate_id,
            "candidate_name": c.candidate_name or "",
            "composite_score": c.composite_score,
            "recommendation": c.recommendation.value,
        }
        for dim in DIMENSIONS:
            score = c.dimension_scores.get(dim)
            row[f"{dim}_score"] = round(score.score, 2) if score else None
            row[f"{dim}_confidence"] = round(score.confidence, 2) if score else None
        row["strengths"] = "; ".join(c.strengths)
        row["weaknesses"] = "; ".join(c.weaknesses)
        row["actionable_insights"] = "; ".join(c.actionable_insights)
        rows.append(row)
    columns = (
        ["ranking_position", "candidate_id", "candidate_name", "composite_score", "recommendation"]
        + [f"{dim}_{kind}" for dim in DIMENSIONS for kind in ("score", "confidence")]
        + ["strengths", "weaknesses", "actionable_insights"]
    )
    return pd.DataFrame(rows, columns=columns)


def write_ranking_json(result: RankingResult, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(result_to_dict(result), f, indent=2, ensure_ascii=False)
    logger.info("Wrote ranking of %d candidates to %s", result.total_count, path)


def write_ranking_csv(result: RankingResult, path: str) -> pd.DataFrame:
    df = results_to_frame(result)
    df.to_csv(path, index=False, encoding="utf-8")
    logger.info("Exported %d rows to %s", len(df), path)
    return df


def load_ranking_json(path: str) -> RankingResult:
    with open(path, "r", encoding="utf-8") as f:
        return result_from_dict(json.load(f))


def filter_ranked(
    result: RankingResult,
    min_score: Optional[int] = None,
    recommendation: Optional[Recommendation] = None,
    limit: int = 50,
    offset: int = 0,
) -> List[RankedCandidate]:
    """Select a page of ranked candidates.

    Candidates keep their ranking order; filters are applied before
    ``offset`` and ``limit``.
    """
    if limit < 1:
        raise ValueError("limit must be at least 1")
    if offset < 0:
        raise ValueError("offset must be non-negative")
    selected = [
        c for c in result.candidates
        if (min_score is None or c.composite_score >= min_score)
        and (recommendation is None or c.recommendation == recommendation)
    ]
    return selected[offset:offset + limit]
