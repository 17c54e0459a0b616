"""
Command line interface for GigRank.

This module exposes two subcommands: ``rank`` scores a file of candidate
responses against a job specification and writes the ranking as JSON
(and optionally CSV); ``report`` prints a human-readable summary of a
saved ranking, with the same filters the web listing offers.  The CLI is
intentionally thin and delegates the work to :mod:`gigrank.rank` and
:mod:`gigrank.results`.

API keys for the optional language model are read from the environment;
a ``.env`` file in the working directory is loaded first.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List

from dotenv import load_dotenv

from .config import RankingConfig, load_config
from .errors import InvalidInput, InvalidJobSpec
from .normalize.loaders import load_candidates, load_job_spec
from .normalize.schema import Recommendation
from .rank.llm_providers import get_default_provider
from .rank.orchestrator import rank
from .results import filter_ranked, load_ranking_json, write_ranking_csv, write_ranking_json

logger = logging.getLogger("gigrank.cli")


def cmd_rank(args: argparse.Namespace) -> None:
    """Rank candidates from a JSON file against a job YAML/JSON file."""
    config = load_config(args.config) if args.config else RankingConfig()
    if args.concurrency is not None:
        config.max_concurrency = max(1, args.concurrency)
    job_spec = load_job_spec(args.job)
    candidates = load_candidates(args.candidates)
    collaborator = get_default_provider() if args.use_llm else None
    result = rank(job_spec, candidates, config=config, collaborator=collaborator)
    write_ranking_json(result, args.out)
    if args.csv:
        write_ranking_csv(result, args.csv)
    logger.info("Ranked %d candidates for '%s'", result.total_count, job_spec.title)


def cmd_report(args: argparse.Namespace) -> None:
    """Print a simple report from a ranking JSON file."""
    result = load_ranking_json(args.ranking)
    recommendation = Recommendation(args.recommendation) if args.recommendation else None
    rows = filter_ranked(
        result,
        min_score=args.min_score,
        recommendation=recommendation,
        limit=args.limit,
        offset=args.offset,
    )
    print(f"Ranked at {result.ranked_at.isoformat()} - {result.total_count} candidates")
    for row in rows:
        name = f" ({row.candidate_name})" if row.candidate_name else ""
        print(
            f"{row.ranking_position:02d}. {row.candidate_id}{name} - "
            f"{row.composite_score}/100 {row.recommendation.value}"
        )
        if row.strengths:
            print(f"   Strengths: {'; '.join(row.strengths)}")
        if row.weaknesses:
            print(f"   Weaknesses: {'; '.join(row.weaknesses)}")
        if row.actionable_insights:
            print(f"   Next steps: {'; '.join(row.actionable_insights)}")
        print()
    if result.category_leaders:
        leaders = ", ".join(f"{k}={v}" for k, v in sorted(result.category_leaders.items()))
        print(f"Category leaders: {leaders}")


def main(argv: List[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="gigrank", description="GigRank CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Rank
    rank_cmd = subparsers.add_parser("rank", help="Rank candidates for a job")
    rank_cmd.add_argument("--job", required=True, help="Job specification (YAML or JSON)")
    rank_cmd.add_argument("--candidates", required=True, help="Candidates JSON file")
    rank_cmd.add_argument("--config", help="Ranking config YAML (weights, thresholds)")
    rank_cmd.add_argument("--concurrency", type=int, help="Maximum concurrent LLM calls")
    llm_group = rank_cmd.add_mutually_exclusive_group()
    llm_group.add_argument(
        "--use-llm",
        dest="use_llm",
        action="store_true",
        default=False,
        help="Use the configured LLM provider for experience and explanations",
    )
    llm_group.add_argument(
        "--no-use-llm",
        dest="use_llm",
        action="store_false",
        help="Use only the local heuristics (default)",
    )
    rank_cmd.add_argument("--out", default="ranking.json", help="Output JSON path")
    rank_cmd.add_argument("--csv", help="Optional CSV export path")
    rank_cmd.set_defaults(func=cmd_rank)

    # Report
    report_cmd = subparsers.add_parser("report", help="Print a ranking report")
    report_cmd.add_argument("--ranking", required=True, help="Path to ranking JSON")
    report_cmd.add_argument("--min-score", type=int, dest="min_score", help="Minimum composite score")
    report_cmd.add_argument(
        "--recommendation",
        choices=[r.value for r in Recommendation],
        help="Only show this recommendation tier",
    )
    report_cmd.add_argument("--limit", type=int, default=20, help="Number of candidates to display")
    report_cmd.add_argument("--offset", type=int, default=0, help="Number of candidates to skip")
    report_cmd.set_defaults(func=cmd_report)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )
    load_dotenv()
    try:
        args.func(args)
    except (InvalidInput, InvalidJobSpec) as exc:
        logger.error("%s", exc)
        parser.exit(2, f"gigrank: error: {exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])
