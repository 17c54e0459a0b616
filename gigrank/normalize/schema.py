# normalize/schema.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional, Set

DIMENSIONS = ["price", "delivery", "skillsMatch", "experience"]


class ExperienceLevel(str, Enum):
    JUNIOR = "junior"
    MIDDLE = "middle"
    SENIOR = "senior"


class Recommendation(str, Enum):
    HIGHLY_RECOMMENDED = "HIGHLY_RECOMMENDED"
    RECOMMENDED = "RECOMMENDED"
    NEUTRAL = "NEUTRAL"
    NOT_RECOMMENDED = "NOT_RECOMMENDED"


@dataclass
class Budget:
    min: Optional[float] = None
    max: Optional[float] = None

    def is_specified(self) -> bool:
        return self.min is not None or self.max is not None

    def is_consistent(self) -> bool:
        if self.min is None or self.max is None:
            return True
        return self.min <= self.max


@dataclass
class JobSpec:
    title: str
    required_skills: Set[str] = field(default_factory=set)
    nice_to_have_skills: Set[str] = field(default_factory=set)
    tech_stack: Set[str] = field(default_factory=set)
    experience_level: Optional[ExperienceLevel] = None
    budget: Budget = field(default_factory=Budget)
    deadline: Optional[date] = None
    job_id: Optional[str] = None
    job_type: Optional[str] = None   # selects per-job-type weights
    summary: str = ""


@dataclass
class CandidateInput:
    id: str
    submitted_at: datetime
    proposed_price: Optional[float] = None
    proposed_delivery_days: Optional[int] = None
    cover_letter_text: Optional[str] = None
    experience_text: Optional[str] = None
    skills: Optional[List[str]] = None
    portfolio_links: Optional[List[str]] = None
    prior_rating: Optional[float] = None       # 0..5
    screening_score: Optional[float] = None    # 0..100
    interview_score: Optional[float] = None    # 0..100
    candidate_name: Optional[str] = None
    hr_selection_status: Optional[str] = None  # 'REJECTED' excludes the candidate


@dataclass(frozen=True)
class DimensionScore:
    name: str
    score: float
    confidence: float


@dataclass(frozen=True)
class Fact:
    """One cohort-relative observation about a candidate dimension."""

    dimension: str
    relation: str    # above_median | below_median | at_median | not_reported
    magnitude: str   # significant | moderate | slight | *_third | absent

    def __str__(self) -> str:
        return f"{self.dimension}:{self.relation}:{self.magnitude}"


@dataclass
class RankedCandidate:
    candidate_id: str
    dimension_scores: Dict[str, DimensionScore]
    composite_score: int
    ranking_position: int
    recommendation: Recommendation
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    actionable_insights: List[str] = field(default_factory=list)
    facts: List[Fact] = field(default_factory=list)
    analysis: str = ""
    explanation_source: str = "heuristic"   # 'external' | 'heuristic'
    raw_composite: float = 0.0
    candidate_name: Optional[str] = None


@dataclass
class RankingResult:
    candidates: List[RankedCandidate]
    ranked_at: datetime
    job_id: Optional[str] = None
    total_count: int = 0
    category_leaders: Dict[str, str] = field(default_factory=dict)
