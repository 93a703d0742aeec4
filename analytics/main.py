"""
Analytics command line.

    python -m analytics.main create --name "Prompt wording" --variant-a short --variant-b long
    python -m analytics.main results exp_1a2b3c4d5e6f
"""

import argparse
import os
import sys

from dotenv import load_dotenv

from common.logging_config import setup_logging

from .models import ExperimentResults
from .tracker import AnalyticsTracker

DEFAULT_PATH = "data/rag/analytics.json"


def print_results(results: ExperimentResults) -> None:
    print("\n" + "=" * 60)
    print(f"A/B Test Results: {results.experiment}")
    print("=" * 60)

    for title, stats in (("Variant A (control)", results.variant_a), ("Variant B (test)", results.variant_b)):
        print(f"\n{title}:")
        print(f"   Sample size: {stats.sample_size}")
        if stats.avg_rating is not None:
            print(f"   Avg rating: {stats.avg_rating}/5 ({stats.ratings_count} ratings)")
        if stats.avg_response_time_ms is not None:
            print(f"   Avg response time: {stats.avg_response_time_ms}ms")

    winner = results.winner
    print(f"\nWinner: {winner.winner or 'TBD'}")
    if winner.metric:
        print(f"   Metric: {winner.metric} (difference {winner.difference})")
    if winner.confidence:
        print(f"   Confidence: {winner.confidence}")
    if winner.reason:
        print(f"   Note: {winner.reason}")
    print("\n" + "=" * 60 + "\n")


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="A/B experiments for the docs chat service")
    parser.add_argument("--path", default=os.environ.get("RAG_ANALYTICS_PATH") or DEFAULT_PATH)
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Create an experiment")
    create.add_argument("--name", required=True)
    create.add_argument("--hypothesis", default="")
    create.add_argument("--variant-a", default="")
    create.add_argument("--variant-b", default="")
    create.add_argument("--success-metric", default="avg_rating")
    create.add_argument("--duration", default="7 days")

    results = sub.add_parser("results", help="Show experiment results")
    results.add_argument("experiment_id")

    args = parser.parse_args(argv)
    setup_logging()
    tracker = AnalyticsTracker(args.path)

    if args.command == "create":
        exp_id = tracker.create_experiment(
            name=args.name,
            hypothesis=args.hypothesis,
            variant_a=args.variant_a,
            variant_b=args.variant_b,
            success_metric=args.success_metric,
            expected_duration=args.duration,
        )
        print(exp_id)
        return 0

    outcome = tracker.get_experiment_results(args.experiment_id)
    if outcome is None:
        print(f"Experiment not found: {args.experiment_id}", file=sys.stderr)
        return 1
    print_results(outcome)
    return 0


if __name__ == "__main__":
    sys.exit(main())
