"""
Batch scoring and spoiler-free ranking of many games.

This module provides:
- GameRecord: one game to score (facts plus an optional embedded series)
- score_games: concurrent scoring of a batch, preserving input order
- rank_games: a ranked pandas DataFrame suitable for display or CSV export

Series that are not embedded in a record are resolved through a caller-owned
ProbabilityCache and series loader before fan-out, so worker processes never
share state.
"""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, Mapping, Sequence

import pandas as pd

from game_excitement.engine.cache import ProbabilityCache
from game_excitement.engine.config import ScoringConfig
from game_excitement.engine.data import GameFacts, RawSample, parse_game_facts, parse_samples
from game_excitement.engine.data_quality import detect_data_quality_issues
from game_excitement.engine.preprocessing import preprocess_samples
from game_excitement.engine.result import ScoreResult
from game_excitement.engine.scoring import compute_excitement

logger = logging.getLogger(__name__)

SeriesLoader = Callable[[str], Sequence[Any] | None]

RANKING_COLUMNS = [
    "rank",
    "game_id",
    "home_team",
    "away_team",
    "sport",
    "score",
    "confidence",
    "tier",
    "narrative",
    "key_factors",
    "fallback",
    "data_quality",
]


@dataclass(frozen=True)
class GameRecord:
    """A game to score: its facts and, optionally, its probability series."""

    facts: GameFacts
    samples: list[RawSample] | None = None
    match_id: str | None = None

    @property
    def key(self) -> str | None:
        """Identifier used to look up a series that is not embedded."""
        return self.match_id or self.facts.game_id

    @classmethod
    def from_dict(cls, record: Mapping, sport: str | None = None) -> GameRecord:
        """
        Build a record from ``{"game": {...}, "probabilities": [...]}``.

        A bare game dict (no ``game`` key) is accepted too, in which case the
        series is read from its ``probabilities`` field if present.

        Raises:
            ValueError: If the record or its game entry is not a mapping
        """
        if not isinstance(record, Mapping):
            raise ValueError(f"Game entry must be a mapping, got {type(record).__name__}")

        game = record.get("game", record)
        facts = parse_game_facts(game, sport=sport)
        match_id = record.get("matchId", record.get("match_id"))

        return cls(
            facts=facts,
            samples=parse_samples(record.get("probabilities")),
            match_id=str(match_id) if match_id is not None else None,
        )


# ============================================================================
# Scoring
# ============================================================================


def _score_record(record: GameRecord, config: ScoringConfig) -> ScoreResult:
    # Module-level so ProcessPoolExecutor can pickle it
    return compute_excitement(record.samples, record.facts, config=config)


def resolve_series(
    record: GameRecord,
    cache: ProbabilityCache | None = None,
    series_loader: SeriesLoader | None = None,
) -> GameRecord:
    """
    Attach a probability series to a record that has none embedded.

    Records with an embedded series, no identifier, or no loader are returned
    unchanged (the latter two score through the fallback model). Loader
    failures are logged and treated as a missing series.
    """
    if record.samples is not None or record.key is None:
        return record
    if cache is None and series_loader is None:
        return record

    def load(key):
        if series_loader is None:
            return None
        try:
            return parse_samples(series_loader(key))
        except Exception:
            logger.exception(f"Failed to load probability series for {key}")
            return None

    if cache is not None:
        samples = cache.get_or_load(record.key, load)
    else:
        samples = load(record.key)

    return replace(record, samples=samples)


def score_games(
    records: Iterable[GameRecord],
    max_workers: int | None = None,
    executor: str = "thread",
    cache: ProbabilityCache | None = None,
    series_loader: SeriesLoader | None = None,
    config: ScoringConfig | None = None,
) -> list[ScoreResult]:
    """
    Score a batch of games concurrently.

    Args:
        records: Games to score
        max_workers: Worker count (None for the executor default, 1 to score
            in the calling thread)
        executor: "thread" or "process"
        cache: Cache of probability series keyed by match identifier
        series_loader: Fetches a series for records without one embedded
        config: Scoring config shared by every game

    Returns:
        One ScoreResult per record, in input order

    Raises:
        ValueError: If executor is not "thread" or "process"
    """
    if executor not in ("thread", "process"):
        raise ValueError(f"executor must be 'thread' or 'process', got {executor!r}")

    config = config or ScoringConfig()
    resolved = [resolve_series(record, cache, series_loader) for record in records]

    if not resolved:
        return []

    if max_workers == 1:
        return [_score_record(record, config) for record in resolved]

    pool_class = ThreadPoolExecutor if executor == "thread" else ProcessPoolExecutor
    with pool_class(max_workers=max_workers) as pool:
        results = list(pool.map(_score_record, resolved, [config] * len(resolved)))

    logger.info(f"Scored {len(results)} games ({sum(r.is_fallback for r in results)} via fallback)")
    return results


# ============================================================================
# Ranking
# ============================================================================


def rank_games(
    records: Iterable[GameRecord],
    top_n: int | None = None,
    max_workers: int | None = None,
    executor: str = "thread",
    cache: ProbabilityCache | None = None,
    series_loader: SeriesLoader | None = None,
    config: ScoringConfig | None = None,
) -> pd.DataFrame:
    """
    Score and rank games by excitement, most exciting first.

    The table is spoiler-free: it carries teams, score, tier and narrative
    but never the final score or the winner. Ties keep input order.

    Args:
        records: Games to rank
        top_n: Keep only the top N rows
        max_workers, executor, cache, series_loader, config: As for score_games

    Returns:
        DataFrame with columns rank, game_id, home_team, away_team, sport,
        score, confidence, tier, narrative, key_factors, fallback,
        data_quality
    """
    config = config or ScoringConfig()
    resolved = [resolve_series(record, cache, series_loader) for record in records]
    results = score_games(resolved, max_workers=max_workers, executor=executor, config=config)

    rows = []
    for record, result in zip(resolved, results):
        facts = record.facts
        quality = detect_data_quality_issues(
            preprocess_samples(record.samples, config), facts, sport=facts.sport
        )
        rows.append({
            "game_id": record.key,
            "home_team": facts.home_team,
            "away_team": facts.away_team,
            "sport": facts.sport,
            "score": result.score,
            "confidence": round(result.confidence, 2),
            "tier": result.tier,
            "narrative": result.narrative,
            "key_factors": ", ".join(result.key_factors),
            "fallback": result.is_fallback,
            "data_quality": quality.severity,
        })

    df = pd.DataFrame(rows, columns=RANKING_COLUMNS[1:])
    df = df.sort_values("score", ascending=False, kind="mergesort").reset_index(drop=True)
    df.insert(0, "rank", range(1, len(df) + 1))

    if top_n is not None:
        df = df.head(top_n)

    return df
