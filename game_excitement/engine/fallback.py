"""
Score-only fallback model.

Used when a game has no probability series, too few samples, or the primary
calculation fails. Works from the final margin, total score, overtime and the
game context alone, and is fully deterministic.
"""

from __future__ import annotations

from game_excitement.engine.config import ScoringConfig
from game_excitement.engine.context import (
    GameContext,
    expectation_multiplier,
    quality_multiplier,
    stakes_multiplier,
    summarize_context_flags,
)
from game_excitement.engine.data import GameFacts
from game_excitement.engine.result import ScoreResult


def fallback_base_score(facts: GameFacts, context: GameContext | None) -> float:
    """Base score from margin band plus scoring, overtime and postseason bonuses."""
    margin = facts.margin

    if margin <= 3:
        base = 8.0
    elif margin <= 7:
        base = 6.5
    elif margin <= 14:
        base = 4.5
    else:
        base = 2.0

    if facts.total_score > 50:
        base += 1.0
    if facts.overtime:
        base += 1.5
    if context is not None and (context.is_playoff or context.is_championship):
        base += 0.5

    return base


def fallback_confidence(stakes: float, quality: float) -> float:
    """Confidence in [0.4, 0.85], moving with the stakes and quality multipliers."""
    return max(0.4, min(0.85, 0.55 + (stakes - 1) * 0.2 + (quality - 1) * 0.1))


def fallback_description(facts: GameFacts, context_flags: list[str]) -> str:
    descriptors = []
    if facts.total_score > 50:
        descriptors.append("High-scoring")
    elif facts.total_score < 35:
        descriptors.append("Defensive battle")

    if facts.margin <= 3:
        descriptors.append("Close finish")
    elif facts.margin > 21:
        descriptors.append("Decisive outcome")

    if facts.overtime:
        descriptors.append("Overtime")

    if context_flags:
        descriptors.append(context_flags[0])

    return ", ".join(descriptors) if descriptors else "Competitive matchup"


def contextual_fallback(
    facts: GameFacts,
    context: GameContext | None,
    config: ScoringConfig | None = None,
) -> ScoreResult:
    """
    Score a game without a usable probability series.

    Args:
        facts: Game facts
        context: Game context (None is treated as a neutral regular-season game)
        config: Scoring config (fallback ceiling and output range)

    Returns:
        ScoreResult flagged as a fallback, with a score-based breakdown
    """
    config = config or ScoringConfig()

    base = fallback_base_score(facts, context)
    stakes = stakes_multiplier(context)
    quality = quality_multiplier(context)
    expectation = expectation_multiplier(context)

    adjusted = min(config.fallback_ceiling, base * stakes * quality * expectation)
    score = min(config.score_ceiling, max(config.score_floor, adjusted))

    context_flags = summarize_context_flags(context)
    key_factors = [
        "Final margin",
        "Total scoring",
        "Overtime" if facts.overtime else "Regulation finish",
    ]

    return ScoreResult(
        score=round(score, 1),
        confidence=fallback_confidence(stakes, quality),
        breakdown={
            "base": round(base, 1),
            "margin": float(facts.margin),
            "total_score": float(facts.total_score),
            "overtime": 1.0 if facts.overtime else 0.0,
            "stakes": round(stakes, 1),
            "quality": round(quality, 1),
            "expectation": round(expectation, 1),
        },
        narrative=fallback_description(facts, context_flags),
        key_factors=key_factors,
        key_moments=[f"Analysis based on {factor.lower()}" for factor in key_factors],
        is_fallback=True,
    )
