"""
Collaborator result schema.

Defines the dataclasses exchanged with the optional text collaborator.
Every result carries a ``source`` tag: ``"external"`` when it came from
a configured language model, ``"heuristic"`` when it was produced by the
local deterministic fallback.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..normalize.schema import Fact, JobSpec

SOURCE_EXTERNAL = "external"
SOURCE_HEURISTIC = "heuristic"

# Both explanation paths return at most this many strengths and weaknesses
MAX_EXPLANATION_ITEMS = 3
MAX_INSIGHTS = 2


@dataclass
class ExperienceAssessment:
    """Quality score for a candidate's experience text."""

    score: float
    confidence: float
    source: str = SOURCE_HEURISTIC


@dataclass
class ExplanationRequest:
    """Structured context passed to the prose generator for one candidate."""

    candidate_id: str
    job: JobSpec
    strengths: List[Fact]
    weaknesses: List[Fact]
    composite_score: int
    ranking_position: int
    total_candidates: int
    recommendation: str
    average_composite: float
    top_composite: float
    candidate_name: Optional[str] = None


@dataclass
class Explanation:
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    analysis: str = ""
    actionable_insights: List[str] = field(default_factory=list)
    source: str = SOURCE_HEURISTIC
