"""
Static game context for excitement scoring.

Derives everything about a game that does not need the probability series:
- Stakes flags (playoff, championship, bowl, rivalry, elimination)
- Importance score
- Contextual multipliers (scoring, competitive balance, stakes, quality,
  expectation) applied on top of the series-based sub-scores
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from game_excitement.engine.data import GameFacts, QualityMetrics


PLAYOFF_PATTERN = re.compile(r"playoff|postseason|championship|bowl", re.IGNORECASE)
CHAMPIONSHIP_PATTERN = re.compile(r"championship|title|final", re.IGNORECASE)
BOWL_PATTERN = re.compile(r"bowl", re.IGNORECASE)
RIVALRY_PATTERN = re.compile(r"rivalry|classic|cup", re.IGNORECASE)
ELIMINATION_PATTERN = re.compile(r"elimination|winner-takes-all|winner take all", re.IGNORECASE)
UPSET_PATTERN = re.compile(r"upset", re.IGNORECASE)
CHALK_PATTERN = re.compile(r"dominant|chalk", re.IGNORECASE)

# Numeric season type at or above which a game is postseason
POSTSEASON_SEASON_TYPE = 3


@dataclass(frozen=True)
class GameContext:
    """Read-only view of a game's stakes, derived from GameFacts."""

    sport: str
    is_playoff: bool = False
    is_championship: bool = False
    is_bowl: bool = False
    is_rivalry: bool = False
    is_elimination: bool = False
    importance_score: float = 0.0
    event_importance: float | None = None
    neutral_site: bool = False
    quality_metrics: QualityMetrics | None = None
    pre_game_spread: float | None = None
    expectation: str | None = None
    margin: int = 0
    total_score: int = 0


@dataclass(frozen=True)
class ContextualFactors:
    """Multipliers derived from the final score and the game context."""

    scoring_context: float = 1.0
    competitive_balance: float = 1.0
    stakes_multiplier: float = 1.0
    quality_factor: float = 1.0
    expectation_adjustment: float = 1.0
    context_summary: list[str] = field(default_factory=list)


def _matches(labels: tuple[str, ...], pattern: re.Pattern) -> bool:
    return any(pattern.search(label) for label in labels)


def build_game_context(facts: GameFacts, sport: str | None = None) -> GameContext:
    """
    Build the stakes context for a game.

    A numeric season type decides playoff status on its own; without one the
    labels are searched instead. The other flags always come from labels.

    Args:
        facts: Game facts
        sport: Sport tag (defaults to facts.sport)

    Returns:
        GameContext
    """
    labels = facts.labels

    if facts.season_type is not None:
        is_playoff = facts.season_type >= POSTSEASON_SEASON_TYPE
    else:
        is_playoff = _matches(labels, PLAYOFF_PATTERN)

    is_championship = _matches(labels, CHAMPIONSHIP_PATTERN)
    is_rivalry = _matches(labels, RIVALRY_PATTERN)

    if facts.event_importance is not None:
        importance = facts.event_importance
    elif is_championship:
        importance = 5.0
    elif is_playoff:
        importance = 3.0
    elif is_rivalry:
        importance = 2.0
    else:
        importance = 0.0

    return GameContext(
        sport=(sport or facts.sport).upper(),
        is_playoff=is_playoff,
        is_championship=is_championship,
        is_bowl=_matches(labels, BOWL_PATTERN),
        is_rivalry=is_rivalry,
        is_elimination=_matches(labels, ELIMINATION_PATTERN),
        importance_score=importance,
        event_importance=facts.event_importance,
        neutral_site=facts.neutral_site,
        quality_metrics=facts.quality_metrics,
        pre_game_spread=facts.pre_game_spread,
        expectation=facts.expectation,
        margin=facts.margin,
        total_score=facts.total_score,
    )


# ============================================================================
# Contextual multipliers
# ============================================================================


def scoring_context_factor(facts: GameFacts) -> float:
    """Reward shootouts and tight low-scoring games, penalize wide margins."""
    total = facts.total_score
    margin = facts.margin

    if total > 60:
        factor = 1.3
    elif total < 30:
        factor = 1.2 if margin <= 3 else 0.8
    else:
        factor = 1.0

    margin_penalty = (margin / 10) ** 1.5
    return max(0.2, factor - margin_penalty * 0.3)


def competitive_balance_factor(margin: int) -> float:
    """Step multiplier by final margin band."""
    if margin <= 3:
        return 1.3
    if margin <= 7:
        return 1.15
    if margin <= 14:
        return 1.0
    return 0.8


def stakes_multiplier(context: GameContext | None) -> float:
    """
    Multiplier for what was riding on the game.

    Championship, playoff and bowl bonuses are exclusive (largest applies);
    rivalry, explicit importance and elimination bonuses stack on top.
    """
    if context is None:
        return 1.0

    multiplier = 1.0

    if context.is_championship:
        multiplier += 0.25
    elif context.is_playoff:
        multiplier += 0.18
    elif context.is_bowl:
        multiplier += 0.12

    if context.is_rivalry:
        multiplier += 0.07

    if context.event_importance is not None:
        multiplier += min(0.2, context.event_importance * 0.04)

    if context.is_elimination:
        multiplier += 0.08

    return min(1.6, max(0.85, multiplier))


def quality_multiplier(context: GameContext | None) -> float:
    """Multiplier for quality of play, from metrics and the final score shape."""
    if context is None:
        return 1.0

    factor = 1.0
    metrics = context.quality_metrics

    if metrics is not None:
        if metrics.offensive_efficiency is not None:
            factor += max(-0.1, min(0.15, (metrics.offensive_efficiency - 1) * 0.1))
        if metrics.turnover_differential is not None:
            factor += max(-0.15, min(0.05, -metrics.turnover_differential * 0.03))
        if metrics.explosive_plays is not None:
            factor += min(0.12, metrics.explosive_plays * 0.01)

    # Sloppy blowout
    if context.total_score < 24 and context.margin >= 17:
        factor -= 0.15
    # Shootout that stayed close
    if context.total_score >= 60 and context.margin <= 10:
        factor += 0.08
    if context.margin >= 25:
        factor -= 0.2

    return min(1.3, max(0.7, factor))


def expectation_multiplier(context: GameContext | None) -> float:
    """Boost upsets, dampen games billed as one-sided."""
    if context is None or context.expectation is None:
        return 1.0

    if UPSET_PATTERN.search(context.expectation):
        return 1.15
    if CHALK_PATTERN.search(context.expectation):
        return 0.92
    return 1.0


def summarize_context_flags(context: GameContext | None) -> list[str]:
    """Short human-readable stakes phrases, most important first."""
    if context is None:
        return []

    flags = []
    if context.is_championship:
        flags.append("Championship stakes")
    elif context.is_playoff:
        flags.append("Playoff stakes")
    elif context.is_bowl:
        flags.append("Bowl game")

    if context.is_rivalry:
        flags.append("Rivalry matchup")
    if context.neutral_site:
        flags.append("Neutral site")
    if context.is_elimination:
        flags.append("Elimination game")

    return flags


def calculate_contextual_factors(facts: GameFacts, context: GameContext) -> ContextualFactors:
    """Compute every contextual multiplier for a game."""
    return ContextualFactors(
        scoring_context=scoring_context_factor(facts),
        competitive_balance=competitive_balance_factor(facts.margin),
        stakes_multiplier=stakes_multiplier(context),
        quality_factor=quality_multiplier(context),
        expectation_adjustment=expectation_multiplier(context),
        context_summary=summarize_context_flags(context),
    )
