"""
Build ``JobSpec`` and ``CandidateInput`` objects from plain mappings.

Used by the CLI to read job and candidate files.  Keys are accepted in
snake_case or in the camelCase form used by the web API
(``requiredSkills``, ``proposedPrice``...).  Optional candidate fields
are passed through untouched; the normaliser decides later whether they
are usable.  Only structural problems (missing id, unparseable
``submitted_at``) raise ``InvalidInput``.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Set

import yaml  # type: ignore

from ..errors import InvalidInput, InvalidJobSpec
from .schema import Budget, CandidateInput, ExperienceLevel, JobSpec

logger = logging.getLogger(__name__)

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")

# camelCase keys whose snake_case form differs from a plain conversion
_ALIASES = {
    "created_at": "submitted_at",
    "cover_letter": "cover_letter_text",
    "experience": "experience_text",
    "rating": "prior_rating",
    "budget_min": "min",
    "budget_max": "max",
}


def _snake(key: str) -> str:
    snake = _CAMEL_RE.sub("_", key).lower()
    return _ALIASES.get(snake, snake)


def _snake_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    return {_snake(str(k)): v for k, v in data.items()}


def _parse_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    return None


def _parse_date(value: Any) -> Optional[date]:
    parsed = _parse_datetime(value)
    return parsed.date() if parsed is not None else None


def _as_set(value: Any) -> Set[str]:
    if value is None:
        return set()
    if isinstance(value, str):
        return {value}
    return {v for v in value if isinstance(v, str)}


def job_spec_from_dict(data: Dict[str, Any]) -> JobSpec:
    """Create a :class:`JobSpec` from a mapping."""
    raw = _snake_keys(data)
    budget_raw = raw.get("budget") or {}
    if not isinstance(budget_raw, dict):
        raise InvalidJobSpec("budget must be a mapping with 'min' and/or 'max'")
    budget_raw = _snake_keys(budget_raw)
    # Flat budgetMin/budgetMax at the top level are accepted as well
    for key in ("min", "max"):
        if key in raw and key not in budget_raw:
            budget_raw[key] = raw[key]
    level = raw.get("experience_level")
    try:
        experience_level = ExperienceLevel(str(level).lower()) if level else None
    except ValueError:
        logger.warning("Unknown experience level %r; ignoring", level)
        experience_level = None
    deadline = raw.get("deadline")
    return JobSpec(
        title=str(raw.get("title", "")),
        required_skills=_as_set(raw.get("required_skills")),
        nice_to_have_skills=_as_set(raw.get("nice_to_have_skills")),
        tech_stack=_as_set(raw.get("tech_stack")),
        experience_level=experience_level,
        budget=Budget(min=budget_raw.get("min"), max=budget_raw.get("max")),
        deadline=_parse_date(deadline) if deadline is not None else None,
        job_id=str(raw["job_id"]) if raw.get("job_id") is not None else (
            str(raw["id"]) if raw.get("id") is not None else None
        ),
        job_type=raw.get("job_type"),
        summary=str(raw.get("summary") or ""),
    )


def candidate_from_dict(data: Dict[str, Any]) -> CandidateInput:
    """Create a :class:`CandidateInput` from a mapping."""
    raw = _snake_keys(data)
    candidate_id = raw.get("id")
    if candidate_id is None or str(candidate_id).strip() == "":
        raise InvalidInput("candidate is missing an 'id'")
    submitted_at = _parse_datetime(raw.get("submitted_at"))
    if submitted_at is None:
        raise InvalidInput(f"candidate {candidate_id} has a missing or invalid 'submitted_at'")
    return CandidateInput(
        id=str(candidate_id),
        submitted_at=submitted_at,
        proposed_price=raw.get("proposed_price"),
        proposed_delivery_days=raw.get("proposed_delivery_days"),
        cover_letter_text=raw.get("cover_letter_text"),
        experience_text=raw.get("experience_text"),
        skills=raw.get("skills"),
        portfolio_links=raw.get("portfolio_links"),
        prior_rating=raw.get("prior_rating"),
        screening_score=raw.get("screening_score"),
        interview_score=raw.get("interview_score"),
        candidate_name=raw.get("candidate_name"),
        hr_selection_status=raw.get("hr_selection_status"),
    )


def load_job_spec(path: str) -> JobSpec:
    """Read a job specification from a YAML or JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise InvalidJobSpec(f"{path} does not contain a job mapping")
    return job_spec_from_dict(data)


def load_candidates(path: str) -> List[CandidateInput]:
    """Read candidates from a JSON file (a list, or ``{"candidates": [...]}``)."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("candidates", [])
    if not isinstance(data, list):
        raise InvalidInput(f"{path} does not contain a list of candidates")
    candidates = [candidate_from_dict(item) for item in data if isinstance(item, dict)]
    logger.debug("Loaded %d candidates from %s", len(candidates), path)
    return candidates
