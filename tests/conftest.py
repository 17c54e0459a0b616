"""Shared fixtures for the GigRank test suite."""

from __future__ import annotations

from datetime import timedelta
from typing import Callable

import pytest  # type: ignore

from gigrank.normalize.schema import Budget, CandidateInput, JobSpec
from helpers import BASE_TIME


@pytest.fixture
def make_candidate() -> Callable[..., CandidateInput]:
    """Factory for candidates submitted ``minutes`` after a fixed base time."""

    def _make(candidate_id: str, minutes: int = 0, **fields: object) -> CandidateInput:
        return CandidateInput(
            id=candidate_id,
            submitted_at=BASE_TIME + timedelta(minutes=minutes),
            **fields,  # type: ignore[arg-type]
        )

    return _make


@pytest.fixture
def django_job() -> JobSpec:
    return JobSpec(
        title="Django API",
        required_skills={"python", "django"},
        budget=Budget(min=1000, max=2000),
        job_id="gig-1",
    )
