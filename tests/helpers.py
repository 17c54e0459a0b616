"""Builders shared by the test modules."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict

from gigrank.normalize.schema import DIMENSIONS, DimensionScore

BASE_TIME = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


def dims(**scores: float) -> Dict[str, DimensionScore]:
    """Dimension scores with full confidence for the given values, neutral elsewhere."""
    result = {name: DimensionScore(name, 50.0, 0.0) for name in DIMENSIONS}
    for name, value in scores.items():
        result[name] = DimensionScore(name, float(value), 1.0)
    return result
