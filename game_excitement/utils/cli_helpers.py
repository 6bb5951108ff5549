"""CLI helper functions shared across commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd

from game_excitement.engine.data_quality import DataQualityReport
from game_excitement.engine.rankings import GameRecord
from game_excitement.engine.result import ScoreResult
from game_excitement.utils.logging import (
    format_score_bar,
    print_info,
    print_section,
    print_success,
    print_warning,
)


def _read_json(path: Path | str) -> Any:
    with open(path) as f:
        return json.load(f)


def load_game_file(path: Path | str, sport: str | None = None) -> GameRecord:
    """
    Load a single game file.

    Args:
        path: JSON file holding ``{"game": {...}, "probabilities": [...]}``
        sport: Sport tag overriding the game's own ``sport`` field

    Returns:
        GameRecord

    Raises:
        ValueError: If the file does not hold a game mapping

    Example:
        >>> record = load_game_file("games/401772839.json", sport="NFL")
        >>> record.facts.home_team
        'Chiefs'
    """
    data = _read_json(path)
    if isinstance(data, list):
        raise ValueError(f"{path} holds a list of games; use the rank command")
    return GameRecord.from_dict(data, sport=sport)


def load_games_file(path: Path | str, sport: str | None = None) -> list[GameRecord]:
    """
    Load a file of games.

    Accepts either a JSON list of game entries or ``{"games": [...]}``.

    Raises:
        ValueError: If the file holds neither form
    """
    data = _read_json(path)
    if isinstance(data, dict) and "games" in data:
        data = data["games"]
    if not isinstance(data, list):
        raise ValueError(f"{path} must hold a list of games or a 'games' list")
    return [GameRecord.from_dict(entry, sport=sport) for entry in data]


def print_score_result(record: GameRecord, result: ScoreResult) -> None:
    """Print one game's score without revealing the outcome."""
    facts = record.facts
    print_section(f"{facts.away_team} @ {facts.home_team} ({facts.sport})")
    print(f"  {format_score_bar(result.score)} {result.score:.1f}/10  {result.tier.upper()}")
    print(f"  {result.narrative}")
    print(f"  Key factors: {', '.join(result.key_factors)}")
    for moment in result.key_moments:
        print(f"    - {moment}")

    if result.is_fallback:
        print_warning(f"Score-based fallback (confidence {result.confidence:.0%})")
    else:
        print_info(f"Confidence: {result.confidence:.0%}")


def print_rankings(rankings: pd.DataFrame) -> None:
    """Print a rankings table produced by rank_games."""
    print(f"\nTop {len(rankings)} Games:")
    print("=" * 70)
    for _, row in rankings.iterrows():
        marker = "*" if row["fallback"] else " "
        print(
            f"{row['rank']:2d}. {row['away_team'] + ' @ ' + row['home_team']:<36} "
            f"{row['score']:4.1f}{marker} {row['tier']}"
        )
        print(f"      {row['narrative']}")
    if rankings["fallback"].any():
        print("\n  * scored without a usable win probability series")


def print_quality_report(record: GameRecord, report: DataQualityReport) -> None:
    facts = record.facts
    print_section(f"DATA QUALITY: {facts.away_team} @ {facts.home_team}")
    if not report.has_issues:
        print_success("No data quality issues detected")
        return

    print_info(f"Overall severity: {report.severity}")
    for issue in report.issues:
        print_warning(f"[{issue.severity}] {issue.type}: {issue.message}")
