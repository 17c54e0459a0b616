"""
Normalisation subpackage.

Defines the value types of the ranking engine (``schema``), helpers that
build them from plain mappings (``loaders``) and the field normaliser
that turns raw candidate attributes into comparable scorer inputs
(``fields``).
"""

from .schema import (  # noqa: F401
    Budget,
    CandidateInput,
    DimensionScore,
    ExperienceLevel,
    Fact,
    JobSpec,
    RankedCandidate,
    RankingResult,
    Recommendation,
)
from .fields import normalize_candidate  # noqa: F401
