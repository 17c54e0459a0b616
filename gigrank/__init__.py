"""
GigRank: multi-criteria candidate ranking for gigs and vacancies.

This package ranks candidate responses to a job against its
requirements and budget.  The flow is:

1. **normalize** – Value types (`JobSpec`, `CandidateInput`...) and the
   field normaliser that converts money, days, skill lists and free text
   into comparable inputs.  Malformed fields degrade to "absent".
2. **rank** – Score each candidate on price, delivery, skills match and
   experience; aggregate the sub-scores with configurable weights into
   a composite; sort into a deterministic total order; classify into
   recommendation tiers; and derive cohort-relative strengths and
   weaknesses.  An optional language model can evaluate experience text
   and phrase the explanations; every such call has a local fallback.
3. **results** – Export and filter helpers for consumers that store or
   display a `RankingResult`.
4. **cli** – Command line entry point for ranking files of candidates.

The engine itself is a pure computation: it reads no storage and keeps
no state between calls.
"""

from importlib import metadata

from .config import RankingConfig, load_config  # noqa: F401
from .errors import InvalidInput, InvalidJobSpec, RankingCancelled  # noqa: F401
from .normalize.schema import (  # noqa: F401
    Budget,
    CandidateInput,
    DimensionScore,
    ExperienceLevel,
    JobSpec,
    RankedCandidate,
    RankingResult,
    Recommendation,
)
from .rank.orchestrator import rank, rank_async  # noqa: F401

try:
    __version__ = metadata.version("gigrank")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0"
