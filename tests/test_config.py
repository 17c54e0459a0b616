"""Tests for the ranking configuration loader."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from gigrank.config import DEFAULT_WEIGHTS, RankingConfig, load_config
from gigrank.normalize.schema import JobSpec

SAMPLES = Path(__file__).resolve().parents[1] / "samples"


class TestRankingConfig(unittest.TestCase):
    def test_defaults(self) -> None:
        config = RankingConfig()
        self.assertEqual(config.weights, DEFAULT_WEIGHTS)
        self.assertEqual(config.thresholds.highly_recommended, 80)
        self.assertEqual(config.skills_floor, 20)
        self.assertEqual(config.reference_delivery_days, 90)

    def test_missing_dimensions_default_to_zero(self) -> None:
        config = RankingConfig(weights={"skillsMatch": 1.0})
        self.assertEqual(config.weights["price"], 0.0)
        self.assertEqual(config.weights["skillsMatch"], 1.0)

    def test_invalid_values_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            RankingConfig(weights={"charisma": 1.0})
        with self.assertRaises(ValueError):
            RankingConfig(weights={"price": -1.0, "delivery": 2.0})
        with self.assertRaises(ValueError):
            RankingConfig(weights={"price": 0.0})
        with self.assertRaises(ValueError):
            RankingConfig.from_dict({"thresholds": {"highly_recommended": 50, "recommended": 60}})
        with self.assertRaises(ValueError):
            RankingConfig(max_concurrency=0)
        with self.assertRaises(ValueError):
            RankingConfig(price_at_min_score=50.0, price_at_max_score=60.0)

    def test_weights_for_job_type(self) -> None:
        config = RankingConfig(weights_by_job_type={"design": {"price": 1.0}})
        self.assertEqual(config.weights_for(JobSpec(title="t", job_type="design"))["price"], 1.0)
        self.assertEqual(config.weights_for(JobSpec(title="t", job_type="other")), config.weights)
        self.assertEqual(config.weights_for(JobSpec(title="t")), config.weights)

    def test_from_dict_warns_on_unknown_keys(self) -> None:
        with self.assertLogs("gigrank.config", level="WARNING") as logs:
            config = RankingConfig.from_dict({"ranking": {"max_concurrency": 2, "colour": "blue"}})
        self.assertEqual(config.max_concurrency, 2)
        self.assertIn("colour", logs.output[0])

    def test_load_sample_config(self) -> None:
        config = load_config(str(SAMPLES / "ranking.yaml"))
        self.assertEqual(config.weights["skillsMatch"], 0.35)
        self.assertEqual(config.weights_by_job_type["design"]["experience"], 0.3)
        self.assertEqual(config.collaborator_timeout, 10)

    def test_load_config_requires_mapping(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "bad.yaml"
            path.write_text("- just\n- a list\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_config(str(path))


if __name__ == "__main__":
    unittest.main()
