"""
Command-line interface for the game excitement engine.

Supports spoiler-free scoring and ranking of finished games:
    gei score game.json --sport NFL
    gei rank week12.json --top 10 --output rankings.csv
    gei check game.json
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from game_excitement.engine.config import ScoringConfig
from game_excitement.utils.logging import print_error, print_success, setup_logging


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Spoiler-free excitement scores for finished games"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log progress at INFO level"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log at DEBUG level (overrides --verbose)"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Score command
    score_parser = subparsers.add_parser(
        "score",
        help="Score a single game file"
    )
    score_parser.add_argument(
        "file",
        type=Path,
        help='JSON file holding {"game": {...}, "probabilities": [...]}'
    )
    score_parser.add_argument(
        "--sport",
        type=str,
        default=None,
        help="Sport tag (default: the game's own, else NFL)"
    )
    score_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file of scoring config overrides"
    )
    score_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON"
    )

    # Rank command
    rank_parser = subparsers.add_parser(
        "rank",
        help="Rank a file of games by excitement"
    )
    rank_parser.add_argument(
        "file",
        type=Path,
        help="JSON file holding a list of games"
    )
    rank_parser.add_argument(
        "--sport",
        type=str,
        default=None,
        help="Sport tag applied to every game"
    )
    rank_parser.add_argument(
        "--top",
        type=int,
        default=None,
        help="Number of games to show"
    )
    rank_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads (default: executor default)"
    )
    rank_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file of scoring config overrides"
    )
    rank_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the rankings to this CSV file"
    )

    # Check command
    check_parser = subparsers.add_parser(
        "check",
        help="Report data quality issues for a game file"
    )
    check_parser.add_argument(
        "file",
        type=Path,
        help='JSON file holding {"game": {...}, "probabilities": [...]}'
    )
    check_parser.add_argument(
        "--sport",
        type=str,
        default=None,
        help="Sport tag"
    )

    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose, debug=args.debug)

    try:
        if args.command == "score":
            return run_score(args)
        elif args.command == "rank":
            return run_rank(args)
        elif args.command == "check":
            return run_check(args)
    except (OSError, ValueError) as e:
        print_error(str(e))
        return 1

    parser.print_help()
    return 0


def _load_config(path: Path | None) -> ScoringConfig:
    return ScoringConfig.from_file(path) if path else ScoringConfig()


def run_score(args) -> int:
    """Score one game."""
    from game_excitement.engine.scoring import compute_excitement
    from game_excitement.utils.cli_helpers import load_game_file, print_score_result

    config = _load_config(args.config)
    record = load_game_file(args.file, sport=args.sport)
    result = compute_excitement(record.samples, record.facts, config=config)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print_score_result(record, result)
    return 0


def run_rank(args) -> int:
    """Rank a file of games."""
    from game_excitement.engine.rankings import rank_games
    from game_excitement.utils.cli_helpers import load_games_file, print_rankings

    config = _load_config(args.config)
    records = load_games_file(args.file, sport=args.sport)
    rankings = rank_games(records, top_n=args.top, max_workers=args.workers, config=config)

    print_rankings(rankings)

    if args.output:
        rankings.to_csv(args.output, index=False)
        print_success(f"Saved rankings to {args.output}")
    return 0


def run_check(args) -> int:
    """Print the data quality report for one game."""
    from game_excitement.engine.data_quality import detect_data_quality_issues
    from game_excitement.engine.preprocessing import preprocess_samples
    from game_excitement.utils.cli_helpers import load_game_file, print_quality_report

    record = load_game_file(args.file, sport=args.sport)
    samples = preprocess_samples(record.samples)
    report = detect_data_quality_issues(samples, record.facts, sport=record.facts.sport)

    print_quality_report(record, report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
