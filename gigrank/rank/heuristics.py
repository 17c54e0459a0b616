"""
Deterministic local fallbacks for the external text collaborator.

``experience_heuristic`` scores free-text experience evidence without any
semantic parsing: it looks for years-of-experience patterns, seniority
keywords and portfolio links, and checks the detected level against the
job's requested level.  Text starts from the same neutral score that
silence gets; only explicit signals (junior keywords, a level below the
one requested) move it down.

``render_facts``, ``render_analysis`` and ``render_insights`` produce the
minimal templated explanations used when no prose generator is available.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Tuple

from ..normalize.fields import ExperienceEvidence
from ..normalize.schema import ExperienceLevel, Fact, JobSpec

HEURISTIC_CONFIDENCE = 0.5
NEUTRAL_SCORE = 50.0

_YEARS_RE = re.compile(
    r"(\d{1,2})\s*\+?\s*(?:years?|yrs?|лет|года?)\b",
    re.IGNORECASE,
)
_SENIOR_KEYWORDS = ("senior", "lead", "principal", "architect", "head of", "staff engineer", "cto")
_MIDDLE_KEYWORDS = ("middle", "mid-level", "intermediate")
_JUNIOR_KEYWORDS = ("junior", "intern", "trainee", "beginner", "entry level", "entry-level", "student")

_LEVEL_ORDER = {
    ExperienceLevel.JUNIOR: 0,
    ExperienceLevel.MIDDLE: 1,
    ExperienceLevel.SENIOR: 2,
}


def extract_years(text: str) -> Optional[int]:
    """Return the largest years-of-experience figure mentioned in ``text``."""
    years = [int(m.group(1)) for m in _YEARS_RE.finditer(text)]
    if not years:
        return None
    return min(max(years), 40)


def detect_level(text: str, years: Optional[int] = None) -> Optional[ExperienceLevel]:
    lowered = text.lower()
    if any(k in lowered for k in _SENIOR_KEYWORDS) or (years is not None and years >= 5):
        return ExperienceLevel.SENIOR
    if any(k in lowered for k in _MIDDLE_KEYWORDS) or (years is not None and years >= 2):
        return ExperienceLevel.MIDDLE
    if any(k in lowered for k in _JUNIOR_KEYWORDS) or years is not None:
        return ExperienceLevel.JUNIOR
    return None


def experience_heuristic(evidence: ExperienceEvidence, job: JobSpec) -> Tuple[float, float]:
    """Score experience text on a 0..100 scale.

    Returns:
        Tuple of (score, confidence).  Without any text the result is the
        neutral score with zero confidence.
    """
    if not evidence.has_text:
        return NEUTRAL_SCORE, 0.0
    text = evidence.combined_text
    years = extract_years(text)
    level = detect_level(text, years)

    score = NEUTRAL_SCORE
    if years is not None:
        score += min(30.0, years * 4.0)
    if level == ExperienceLevel.SENIOR:
        score += 15.0
    elif level == ExperienceLevel.MIDDLE:
        score += 8.0
    elif level == ExperienceLevel.JUNIOR:
        score -= 10.0
    if job.experience_level is not None and level is not None:
        gap = _LEVEL_ORDER[job.experience_level] - _LEVEL_ORDER[level]
        if gap > 0:
            score -= 10.0 * gap
    score += min(10.0, 5.0 * evidence.portfolio_count)
    if len(text) >= 400:
        score += 5.0
    return max(0.0, min(100.0, score)), HEURISTIC_CONFIDENCE


def render_facts(facts: Iterable[Fact]) -> List[str]:
    return [str(fact) for fact in facts]


def render_analysis(
    position: int,
    total: int,
    composite: int,
    average: float,
    top: float,
) -> str:
    if total <= 1:
        return f"Only candidate in the cohort; composite score {composite} on absolute criteria."
    return (
        f"Ranked {position} of {total} with composite score {composite} "
        f"(cohort average {average:.0f}, top {top:.0f})."
    )


_INSIGHT_BY_WEAKNESS = {
    "price": "Discuss the rate: the quote is less competitive than most responses.",
    "delivery": "Confirm the timeline: the proposed delivery is slower than most responses.",
    "skillsMatch": "Check the required skills in an interview or test task.",
    "experience": "Ask for portfolio samples or references to confirm experience.",
}
_MISSING_SKILLS_INSIGHT = "Ask the candidate to list the skills relevant to this job."
_INSIGHT_BY_RECOMMENDATION = {
    "HIGHLY_RECOMMENDED": "Invite to an interview soon.",
    "RECOMMENDED": "Shortlist for an interview.",
    "NEUTRAL": "Review the full response before deciding.",
    "NOT_RECOMMENDED": "Consider other candidates first.",
}


def render_insights(weaknesses: List[Fact], recommendation: str, limit: int = 2) -> List[str]:
    """One or two next steps: the top weakness to clarify, then the tier action."""
    insights: List[str] = []
    if weaknesses:
        top = weaknesses[0]
        if top.relation == "not_reported":
            insights.append(_MISSING_SKILLS_INSIGHT)
        else:
            insights.append(_INSIGHT_BY_WEAKNESS.get(top.dimension, _INSIGHT_BY_RECOMMENDATION["NEUTRAL"]))
    action = _INSIGHT_BY_RECOMMENDATION.get(recommendation)
    if action:
        insights.append(action)
    return insights[:limit]
