"""
Ranking subsystem for GigRank.

The `rank` package turns normalised candidates into an ordered,
explained result.  The stages are:

* `scorers` – Price, delivery, skills-match and experience sub-scores
  (0..100) with a confidence for each.
* `aggregate` – Weighted composite score and the deterministic total
  order used to assign ranking positions.
* `classify` – Recommendation tiers from the composite score, with the
  skills floor override.
* `compare` – Cohort-relative facts, strengths, weaknesses and
  category leaders.
* `llm_providers` – Optional external text collaborator (OpenAI,
  Gemini) with a local placeholder fallback.
* `orchestrator` – The `rank` entry point wiring the above together.
"""

from .aggregate import aggregate_scores  # noqa: F401
from .classify import classify  # noqa: F401
from .compare import compare_cohort  # noqa: F401
from .llm_providers import get_default_provider  # noqa: F401
from .orchestrator import rank, rank_async  # noqa: F401
from .scorers import score_dimensions  # noqa: F401
