"""
Field normalisation for candidate responses.

Converts the raw, heterogeneous attributes of a :class:`CandidateInput`
(money, days, skill lists, free text) into comparable inputs for the
dimension scorers.  Nothing in this module raises on bad data: a field
that is missing, of the wrong type or out of range is treated as absent
and the scorers fall back to their neutral value with zero confidence.
Free text is not interpreted here; it is passed through as evidence for
the experience scorer.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Optional, Set, Tuple

from .schema import Budget, CandidateInput, JobSpec

logger = logging.getLogger(__name__)

_SKILL_SPLIT_RE = re.compile(r"[,;/|]")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class SkillOverlap:
    """Overlap between a candidate's skills and the job's skill lists."""

    has_skills: bool
    required_total: int
    required_matched: Set[str] = field(default_factory=set)
    nice_total: int = 0
    nice_matched: Set[str] = field(default_factory=set)
    unmatched: List[str] = field(default_factory=list)


@dataclass
class ExperienceEvidence:
    """Opaque experience evidence handed to the experience scorer."""

    experience_text: Optional[str]
    cover_letter_text: Optional[str]
    portfolio_count: int
    prior_rating: Optional[float]
    screening_score: Optional[float]
    interview_score: Optional[float]

    @property
    def has_text(self) -> bool:
        return bool(self.experience_text or self.cover_letter_text)

    @property
    def combined_text(self) -> str:
        return "\n".join(t for t in (self.experience_text, self.cover_letter_text) if t)


@dataclass
class NormalizedCandidate:
    candidate: CandidateInput
    price: Optional[float]
    delivery_days: Optional[int]
    delivery_window: float
    budget_band: Optional[Tuple[float, float]]
    skills_display: List[str]
    skills: SkillOverlap
    experience: ExperienceEvidence


def coerce_number(
    value: object,
    lower: Optional[float] = None,
    upper: Optional[float] = None,
) -> Optional[float]:
    """Return ``value`` as a finite float within bounds, else ``None``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().replace(" ", ""))
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    if lower is not None and number < lower:
        return None
    if upper is not None and number > upper:
        return None
    return number


def normalize_skill(token: object) -> Optional[str]:
    """Lower-case, trim and collapse whitespace; ``None`` for empty tokens."""
    if not isinstance(token, str):
        return None
    cleaned = _WHITESPACE_RE.sub(" ", token).strip().lower()
    return cleaned or None


def normalize_skill_set(skills: Iterable[object]) -> Set[str]:
    result: Set[str] = set()
    for skill in skills or ():
        norm = normalize_skill(skill)
        if norm:
            result.add(norm)
    return result


def _split_candidate_skills(skills: object) -> Tuple[List[str], Set[str]]:
    """Return the display list and the normalised token set of a skills field."""
    if skills is None:
        return [], set()
    if isinstance(skills, str) or not isinstance(skills, (list, tuple)):
        logger.debug("Ignoring malformed skills field of type %s", type(skills).__name__)
        return [], set()
    display: List[str] = []
    tokens: Set[str] = set()
    for entry in skills:
        if not isinstance(entry, str) or not entry.strip():
            continue
        display.append(entry.strip())
        for piece in _SKILL_SPLIT_RE.split(entry):
            norm = normalize_skill(piece)
            if norm:
                tokens.add(norm)
    return display, tokens


def skill_overlap(skills: object, job: JobSpec) -> Tuple[List[str], SkillOverlap]:
    """Match candidate skills against the job's required and nice-to-have sets."""
    display, tokens = _split_candidate_skills(skills)
    required = normalize_skill_set(job.required_skills)
    nice = normalize_skill_set(job.nice_to_have_skills) - required
    vocabulary = required | nice | normalize_skill_set(job.tech_stack)
    overlap = SkillOverlap(
        has_skills=bool(tokens),
        required_total=len(required),
        required_matched=tokens & required,
        nice_total=len(nice),
        nice_matched=tokens & nice,
        unmatched=sorted(tokens - vocabulary),
    )
    return display, overlap


def budget_band(budget: Budget) -> Optional[Tuple[float, float]]:
    """Return ``(lo, hi)`` for the job's budget, or ``None`` if unusable.

    A missing minimum is treated as zero; a missing maximum is taken as
    twice the minimum so that a floor-only budget still has a ceiling.
    """
    lo = coerce_number(budget.min, lower=0)
    hi = coerce_number(budget.max, lower=0)
    if lo is None and hi is None:
        return None
    if hi is None:
        hi = 2 * lo  # type: ignore[operator]
    if lo is None:
        lo = 0.0
    return lo, hi


def _as_date(value: object) -> Optional[date]:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    return None


def delivery_window(job: JobSpec, submitted_at: object, reference_days: int) -> float:
    """Days the candidate had until the deadline, or the reference window.

    The window is counted from the candidate's own submission date so the
    result never depends on when the ranking runs.  A deadline that had
    already passed at submission yields a one-day window.
    """
    deadline = _as_date(job.deadline)
    submitted = _as_date(submitted_at)
    if deadline is None or submitted is None:
        return float(reference_days)
    return float(max(1, (deadline - submitted).days))


def normalize_candidate(
    candidate: CandidateInput,
    job: JobSpec,
    reference_days: int,
) -> NormalizedCandidate:
    """Normalise one candidate against the job specification."""
    price = coerce_number(candidate.proposed_price, lower=0)
    days = coerce_number(candidate.proposed_delivery_days, lower=0)
    if days is not None and not days.is_integer():
        days = float(math.ceil(days))
    display, overlap = skill_overlap(candidate.skills, job)
    links = candidate.portfolio_links
    portfolio_count = (
        sum(1 for link in links if isinstance(link, str) and link.strip())
        if isinstance(links, (list, tuple))
        else 0
    )
    evidence = ExperienceEvidence(
        experience_text=_clean_text(candidate.experience_text),
        cover_letter_text=_clean_text(candidate.cover_letter_text),
        portfolio_count=portfolio_count,
        prior_rating=coerce_number(candidate.prior_rating, lower=0, upper=5),
        screening_score=coerce_number(candidate.screening_score, lower=0, upper=100),
        interview_score=coerce_number(candidate.interview_score, lower=0, upper=100),
    )
    if candidate.proposed_price is not None and price is None:
        logger.debug("Candidate %s: malformed price %r treated as absent", candidate.id, candidate.proposed_price)
    if candidate.proposed_delivery_days is not None and days is None:
        logger.debug(
            "Candidate %s: malformed delivery days %r treated as absent",
            candidate.id,
            candidate.proposed_delivery_days,
        )
    return NormalizedCandidate(
        candidate=candidate,
        price=price,
        delivery_days=int(days) if days is not None else None,
        delivery_window=delivery_window(job, candidate.submitted_at, reference_days),
        budget_band=budget_band(job.budget),
        skills_display=display,
        skills=overlap,
        experience=evidence,
    )


def _clean_text(value: object) -> Optional[str]:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None
