"""Tests for composite scoring, ordering and recommendation tiers."""

from __future__ import annotations

import unittest
from datetime import datetime, timedelta, timezone

from gigrank.config import DEFAULT_WEIGHTS, RankingConfig, RecommendationThresholds
from gigrank.normalize.schema import CandidateInput, DimensionScore, Recommendation
from gigrank.rank.aggregate import aggregate_scores, composite_score, round_score
from gigrank.rank.classify import classify, tier_rank

from helpers import BASE_TIME, dims


def _candidate(cid: str, minutes: int = 0) -> CandidateInput:
    return CandidateInput(id=cid, submitted_at=BASE_TIME + timedelta(minutes=minutes))


class TestComposite(unittest.TestCase):
    def test_all_neutral_is_fifty(self) -> None:
        self.assertAlmostEqual(composite_score(dims(), DEFAULT_WEIGHTS), 50.0)

    def test_weights_need_not_sum_to_one(self) -> None:
        weights = {"price": 2.0, "delivery": 0.0, "skillsMatch": 2.0, "experience": 0.0}
        score = composite_score(dims(price=40, skillsMatch=80), weights)
        self.assertAlmostEqual(score, 60.0)

    def test_round_half_up(self) -> None:
        self.assertEqual(round_score(79.5), 80)
        self.assertEqual(round_score(79.49), 79)
        self.assertEqual(round_score(32.5), 33)


class TestOrdering(unittest.TestCase):
    weights = {"price": 1.0, "delivery": 0.0, "skillsMatch": 1.0, "experience": 0.0}

    def test_higher_composite_first(self) -> None:
        ordered = aggregate_scores(
            [(_candidate("a"), dims(price=10, skillsMatch=10)), (_candidate("b"), dims(price=90, skillsMatch=90))],
            self.weights,
        )
        self.assertEqual([e.candidate.id for e in ordered], ["b", "a"])
        self.assertEqual([e.ranking_position for e in ordered], [1, 2])

    def test_skills_breaks_composite_tie(self) -> None:
        ordered = aggregate_scores(
            [(_candidate("a"), dims(price=60, skillsMatch=40)), (_candidate("b"), dims(price=40, skillsMatch=60))],
            self.weights,
        )
        self.assertEqual([e.candidate.id for e in ordered], ["b", "a"])

    def test_earlier_submission_then_id_break_ties(self) -> None:
        ordered = aggregate_scores(
            [
                (_candidate("c", minutes=5), dims(price=50, skillsMatch=50)),
                (_candidate("b", minutes=0), dims(price=50, skillsMatch=50)),
                (_candidate("a", minutes=5), dims(price=50, skillsMatch=50)),
            ],
            self.weights,
        )
        self.assertEqual([e.candidate.id for e in ordered], ["b", "a", "c"])

    def test_naive_and_aware_timestamps_compare(self) -> None:
        naive = CandidateInput(id="n", submitted_at=datetime(2026, 10, 1, 11, 0))
        aware = CandidateInput(id="z", submitted_at=datetime(2026, 10, 1, 10, 0, tzinfo=timezone.utc))
        ordered = aggregate_scores([(naive, dims()), (aware, dims())], self.weights)
        self.assertEqual([e.candidate.id for e in ordered], ["z", "n"])


class TestClassify(unittest.TestCase):
    config = RankingConfig()

    def _tier(self, composite: int, skills: float = 100.0) -> Recommendation:
        return classify(composite, dims(skillsMatch=skills), self.config)

    def test_threshold_boundaries(self) -> None:
        self.assertEqual(self._tier(80), Recommendation.HIGHLY_RECOMMENDED)
        self.assertEqual(self._tier(79), Recommendation.RECOMMENDED)
        self.assertEqual(self._tier(60), Recommendation.RECOMMENDED)
        self.assertEqual(self._tier(59), Recommendation.NEUTRAL)
        self.assertEqual(self._tier(40), Recommendation.NEUTRAL)
        self.assertEqual(self._tier(39), Recommendation.NOT_RECOMMENDED)

    def test_skills_floor_caps_at_neutral(self) -> None:
        self.assertEqual(self._tier(95, skills=19.9), Recommendation.NEUTRAL)
        self.assertEqual(self._tier(95, skills=20.0), Recommendation.HIGHLY_RECOMMENDED)

    def test_skills_floor_never_raises_a_tier(self) -> None:
        self.assertEqual(self._tier(30, skills=0.0), Recommendation.NOT_RECOMMENDED)

    def test_custom_thresholds(self) -> None:
        config = RankingConfig(thresholds=RecommendationThresholds(90, 70, 50))
        scores = {"skillsMatch": DimensionScore("skillsMatch", 100.0, 1.0)}
        self.assertEqual(classify(85, scores, config), Recommendation.RECOMMENDED)
        self.assertEqual(classify(45, scores, config), Recommendation.NOT_RECOMMENDED)

    def test_tier_rank_order(self) -> None:
        ranks = [tier_rank(r) for r in (
            Recommendation.NOT_RECOMMENDED,
            Recommendation.NEUTRAL,
            Recommendation.RECOMMENDED,
            Recommendation.HIGHLY_RECOMMENDED,
        )]
        self.assertEqual(ranks, [0, 1, 2, 3])


if __name__ == "__main__":
    unittest.main()
