"""
Ranking configuration.

All tunable numbers used by the scorers, the aggregator and the
classifier live in :class:`RankingConfig`.  Defaults are exposed as
module level constants so callers can reference them by name.  A YAML
file can override any subset of them; the file may either contain the
keys directly or nest them under a top level ``ranking`` key::

    ranking:
      weights: {price: 0.2, delivery: 0.1, skillsMatch: 0.45, experience: 0.25}
      weights_by_job_type:
        design: {price: 0.3, delivery: 0.2, skillsMatch: 0.2, experience: 0.3}
      thresholds: {highly_recommended: 85, recommended: 65, neutral: 40}
      max_concurrency: 8
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

import yaml  # type: ignore

from .normalize.schema import DIMENSIONS, JobSpec

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS: Dict[str, float] = {
    "price": 0.25,
    "delivery": 0.15,
    "skillsMatch": 0.35,
    "experience": 0.25,
}

HIGHLY_RECOMMENDED_THRESHOLD = 80.0
RECOMMENDED_THRESHOLD = 60.0
NEUTRAL_THRESHOLD = 40.0
SKILLS_FLOOR = 20.0

REFERENCE_DELIVERY_DAYS = 90
PRICE_AT_MIN_SCORE = 90.0
PRICE_AT_MAX_SCORE = 60.0
OVERAGE_PENALTY = 100.0

MAX_CONCURRENCY = 4
COLLABORATOR_TIMEOUT = 10.0
STD_COHORT_SIZE = 5


@dataclass
class RecommendationThresholds:
    highly_recommended: float = HIGHLY_RECOMMENDED_THRESHOLD
    recommended: float = RECOMMENDED_THRESHOLD
    neutral: float = NEUTRAL_THRESHOLD

    def __post_init__(self) -> None:
        if not (self.highly_recommended >= self.recommended >= self.neutral):
            raise ValueError(
                "thresholds must satisfy highly_recommended >= recommended >= neutral"
            )


def _validate_weights(weights: Dict[str, float], label: str) -> Dict[str, float]:
    unknown = set(weights) - set(DIMENSIONS)
    if unknown:
        raise ValueError(f"Unknown dimensions in {label}: {sorted(unknown)}")
    merged = {dim: float(weights.get(dim, 0.0)) for dim in DIMENSIONS}
    if any(w < 0 for w in merged.values()):
        raise ValueError(f"{label} must be non-negative")
    if sum(merged.values()) <= 0:
        raise ValueError(f"{label} must have a positive total")
    return merged


@dataclass
class RankingConfig:
    """Weights, thresholds and execution limits for one ranking run."""

    weights: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))
    weights_by_job_type: Dict[str, Dict[str, float]] = field(default_factory=dict)
    thresholds: RecommendationThresholds = field(default_factory=RecommendationThresholds)
    skills_floor: float = SKILLS_FLOOR
    reference_delivery_days: int = REFERENCE_DELIVERY_DAYS
    price_at_min_score: float = PRICE_AT_MIN_SCORE
    price_at_max_score: float = PRICE_AT_MAX_SCORE
    overage_penalty: float = OVERAGE_PENALTY
    max_concurrency: int = MAX_CONCURRENCY
    collaborator_timeout: float = COLLABORATOR_TIMEOUT
    std_cohort_size: int = STD_COHORT_SIZE

    def __post_init__(self) -> None:
        self.weights = _validate_weights(self.weights, "weights")
        self.weights_by_job_type = {
            job_type: _validate_weights(w, f"weights_by_job_type[{job_type}]")
            for job_type, w in self.weights_by_job_type.items()
        }
        if self.reference_delivery_days <= 0:
            raise ValueError("reference_delivery_days must be positive")
        if self.max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        if self.collaborator_timeout <= 0:
            raise ValueError("collaborator_timeout must be positive")
        if not 0 <= self.price_at_max_score <= self.price_at_min_score <= 100:
            raise ValueError("price scores must satisfy 0 <= price_at_max_score <= price_at_min_score <= 100")

    def weights_for(self, job: JobSpec) -> Dict[str, float]:
        """Return the weights for the job's type, falling back to the defaults."""
        if job.job_type and job.job_type in self.weights_by_job_type:
            return self.weights_by_job_type[job.job_type]
        return self.weights

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, object]]) -> "RankingConfig":
        data = dict(data or {})
        if isinstance(data.get("ranking"), dict):
            data = dict(data["ranking"])  # type: ignore[arg-type]
        thresholds = data.pop("thresholds", None)
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(sorted(unknown)))
        kwargs = {k: v for k, v in data.items() if k in known}
        if thresholds is not None:
            kwargs["thresholds"] = RecommendationThresholds(**thresholds)  # type: ignore[arg-type]
        return cls(**kwargs)  # type: ignore[arg-type]


def load_config(config_path: str) -> RankingConfig:
    """Load a :class:`RankingConfig` from a YAML file."""
    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")
    config = RankingConfig.from_dict(data)
    logger.debug("Loaded ranking config from %s", config_path)
    return config
