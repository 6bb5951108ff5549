"""
Data types and ingestion for the excitement engine.

Upstream providers deliver probability series and game records as loosely
shaped dicts with many alternate field names. This module resolves them once,
with a best-available-field strategy, into strict types:
- RawSample: one parsed (not yet normalized) probability observation
- ProbabilitySample: a normalized sample, produced by the preprocessor
- GameFacts / QualityMetrics: static facts about a finished game

No extractor ever looks at the raw dicts.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

logger = logging.getLogger(__name__)


# Candidate field names, in priority order
PROBABILITY_FIELDS = (
    "homeWinPercentage",
    "home_win_percentage",
    "homeWinProbability",
    "home_win_probability",
    "probability",
    "winProbability",
    "value",
)
PERIOD_FIELDS = ("period", "quarter", "inning", "half")
TIME_REMAINING_FIELDS = (
    "timeRemaining",
    "time_remaining",
    "timeRemainingSeconds",
    "secondsRemaining",
    "seconds_remaining",
    "clock",
)
HOME_SCORE_FIELDS = (
    "homeScore",
    "home_score",
    "homeTeamScore",
    "homeTeamPoints",
    "homePoints",
    "home",
    "team1Score",
)
AWAY_SCORE_FIELDS = (
    "awayScore",
    "away_score",
    "awayTeamScore",
    "awayTeamPoints",
    "awayPoints",
    "away",
    "team2Score",
)

_CLOCK_PATTERN = re.compile(r"^\s*(\d+):(\d{1,2}(?:\.\d+)?)\s*$")


# ============================================================================
# Types
# ============================================================================


@dataclass(frozen=True)
class RawSample:
    """A parsed probability observation before normalization."""

    probability: float | None  # fraction (0-1) or percentage (0-100)
    period: int | None = None
    time_remaining: float | None = None  # seconds
    home_score: int | None = None
    away_score: int | None = None


@dataclass(frozen=True)
class ProbabilitySample:
    """A cleaned probability sample (home team win chance, percentage scale)."""

    probability: float  # [0.1, 99.9]
    period: int
    time_remaining_seconds: float
    sequence_index: int
    home_score: int | None = None
    away_score: int | None = None

    @property
    def has_scoreboard(self) -> bool:
        return self.home_score is not None and self.away_score is not None


@dataclass(frozen=True)
class QualityMetrics:
    """Optional quality-of-play statistics for a game."""

    offensive_efficiency: float | None = None
    turnover_differential: float | None = None
    explosive_plays: float | None = None

    def is_empty(self) -> bool:
        return (
            self.offensive_efficiency is None
            and self.turnover_differential is None
            and self.explosive_plays is None
        )


@dataclass(frozen=True)
class GameFacts:
    """Static facts about a finished game."""

    home_team: str
    away_team: str
    home_score: int = 0
    away_score: int = 0
    overtime: bool = False
    labels: tuple[str, ...] = field(default_factory=tuple)
    season_type: float | None = None
    event_importance: float | None = None
    quality_metrics: QualityMetrics | None = None
    pre_game_spread: float | None = None
    expectation: str | None = None
    neutral_site: bool = False
    game_id: str | None = None
    sport: str = "NFL"

    @property
    def margin(self) -> int:
        return abs(self.home_score - self.away_score)

    @property
    def total_score(self) -> int:
        return self.home_score + self.away_score


# ============================================================================
# Field readers
# ============================================================================


def to_number(value: Any, default: float | None = None) -> float | None:
    """
    Read a finite number from a loosely typed value.

    Accepts numbers, numeric strings and ESPN-style ``{"value": ...}`` or
    ``{"displayValue": ...}`` objects. Booleans are not numbers here.
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else default

    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return default
        return parsed if math.isfinite(parsed) else default

    if isinstance(value, Mapping):
        if "value" in value:
            return to_number(value["value"], default)
        if "displayValue" in value:
            return to_number(value["displayValue"], default)

    return default


def to_int(value: Any, default: int | None = None) -> int | None:
    number = to_number(value)
    if number is None:
        return default
    return int(number)


def parse_clock(value: Any) -> float | None:
    """Read a time remaining in seconds from a number or a ``MM:SS`` clock."""
    if isinstance(value, Mapping):
        value = value.get("value", value.get("displayValue"))

    if isinstance(value, str):
        match = _CLOCK_PATTERN.match(value)
        if match:
            return int(match.group(1)) * 60 + float(match.group(2))

    seconds = to_number(value)
    if seconds is None or seconds < 0:
        return None
    return seconds


def first_available(record: Mapping, candidates: Iterable[str], reader=to_number):
    """Return the first candidate field that reads to a non-None value."""
    for name in candidates:
        if name in record:
            value = reader(record[name])
            if value is not None:
                return value
    return None


def _nested_team_score(record: Mapping, side: str) -> int | None:
    team = record.get(f"{side}Team")
    if isinstance(team, Mapping):
        return to_int(team.get("score"))
    return None


# ============================================================================
# Ingestion
# ============================================================================


def parse_sample(record: Mapping) -> RawSample:
    """Parse one upstream probability record into a RawSample."""
    home = first_available(record, HOME_SCORE_FIELDS, to_int)
    if home is None:
        home = _nested_team_score(record, "home")

    away = first_available(record, AWAY_SCORE_FIELDS, to_int)
    if away is None:
        away = _nested_team_score(record, "away")

    period = first_available(record, PERIOD_FIELDS, to_int)

    return RawSample(
        probability=first_available(record, PROBABILITY_FIELDS),
        period=period if period is not None and period >= 1 else None,
        time_remaining=first_available(record, TIME_REMAINING_FIELDS, parse_clock),
        home_score=home,
        away_score=away,
    )


def parse_samples(records: Iterable[Any] | None) -> list[RawSample] | None:
    """
    Parse an upstream probability series.

    Args:
        records: Sequence of dicts, bare numbers, or None

    Returns:
        List of RawSample in input order, or None if no series was supplied.
        Entries that are neither mappings nor numbers are skipped.
    """
    if records is None:
        return None

    samples = []
    for index, record in enumerate(records):
        if isinstance(record, RawSample):
            samples.append(record)
        elif isinstance(record, Mapping):
            samples.append(parse_sample(record))
        elif to_number(record) is not None:
            samples.append(RawSample(probability=to_number(record)))
        else:
            logger.warning(f"Skipping unreadable probability record at index {index}")

    return samples


def parse_quality_metrics(record: Any) -> QualityMetrics | None:
    if not isinstance(record, Mapping):
        return None

    metrics = QualityMetrics(
        offensive_efficiency=to_number(
            record.get("offensiveEfficiency", record.get("offensive_efficiency"))
        ),
        turnover_differential=to_number(
            record.get("turnoverDifferential", record.get("turnover_differential"))
        ),
        explosive_plays=to_number(
            record.get("explosivePlays", record.get("explosive_plays"))
        ),
    )
    return None if metrics.is_empty() else metrics


def _read(record: Mapping, *names: str, default: Any = None) -> Any:
    for name in names:
        if name in record and record[name] is not None:
            return record[name]
    return default


def parse_game_facts(record: Mapping, sport: str | None = None) -> GameFacts:
    """
    Parse an upstream game record into GameFacts.

    Missing or malformed scores default to 0; every contextual field is
    optional.

    Args:
        record: Game dict (camelCase or snake_case keys)
        sport: Sport tag, overriding any ``sport`` field in the record

    Returns:
        GameFacts

    Raises:
        ValueError: If record is not a mapping
    """
    if isinstance(record, GameFacts):
        return record
    if not isinstance(record, Mapping):
        raise ValueError(f"Game record must be a mapping, got {type(record).__name__}")

    labels = _read(record, "labels", default=())
    if isinstance(labels, str):
        labels = (labels,)
    labels = tuple(str(label) for label in labels if label is not None)

    expectation = _read(record, "expectation")
    game_id = _read(record, "id", "gameId", "game_id")

    return GameFacts(
        home_team=str(_read(record, "homeTeam", "home_team", default="Home")),
        away_team=str(_read(record, "awayTeam", "away_team", default="Away")),
        home_score=to_int(_read(record, "homeScore", "home_score"), 0),
        away_score=to_int(_read(record, "awayScore", "away_score"), 0),
        overtime=bool(_read(record, "overtime", default=False)),
        labels=labels,
        season_type=to_number(_read(record, "seasonType", "season_type")),
        event_importance=to_number(_read(record, "eventImportance", "event_importance")),
        quality_metrics=parse_quality_metrics(_read(record, "qualityMetrics", "quality_metrics")),
        pre_game_spread=to_number(_read(record, "preGameSpread", "pre_game_spread")),
        expectation=expectation if isinstance(expectation, str) else None,
        neutral_site=bool(_read(record, "neutralSite", "neutral_site", default=False)),
        game_id=str(game_id) if game_id is not None else None,
        sport=str(sport or _read(record, "sport", default="NFL")).upper(),
    )
