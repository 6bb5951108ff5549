"""
Spoiler-free narrative generation.

Turns the extracted features into short phrases a viewer can read before
watching: never a score, a margin or a winner.
"""

from __future__ import annotations

from game_excitement.engine.context import ContextualFactors, GameContext
from game_excitement.engine.data import GameFacts
from game_excitement.engine.features import FeatureSet


MAX_PHRASES = 3
MAX_KEY_FACTORS = 3
MAX_KEY_MOMENTS = 3


def spoiler_free_description(
    features: FeatureSet,
    facts: GameFacts,
    context: GameContext | None = None,
) -> str:
    """
    Describe a game in at most three comma-joined phrases.

    Args:
        features: Extracted features
        facts: Game facts (total score and overtime only)
        context: Game context for the stakes phrase

    Returns:
        Description such as "Multiple lead changes, Late drama, Balanced scoring"
    """
    descriptors = []

    if features.lead_changes >= 3:
        descriptors.append("Multiple lead changes")
    elif features.lead_changes >= 1:
        descriptors.append("Back-and-forth action")

    if features.time_weighted_uncertainty >= 28:
        descriptors.append("Late drama")
    if features.uncertainty_persistence > 0.6:
        descriptors.append("Sustained tension")

    total = facts.total_score
    if total > 60:
        descriptors.append("High-scoring affair")
    elif total < 35:
        descriptors.append("Defensive battle")
    else:
        descriptors.append("Balanced scoring")

    if facts.overtime:
        descriptors.append("Overtime thriller")

    if features.comeback_factor > 35:
        descriptors.append("Comeback drama")

    if context is not None:
        if context.is_playoff or context.is_championship:
            descriptors.append("Title stakes" if context.is_championship else "Playoff stakes")
        elif context.is_bowl:
            descriptors.append("Bowl spotlight")
        elif context.is_rivalry:
            descriptors.append("Rivalry energy")

    if not descriptors:
        return "Competitive matchup"
    return ", ".join(descriptors[:MAX_PHRASES])


def identify_key_factors(features: FeatureSet, factors: ContextualFactors) -> list[str]:
    """
    Rank the most salient factors by magnitude.

    The five series-based factors always compete; lead changes, stakes,
    quality and a composed finish join only when they clear their gates.
    Ties keep candidate order.
    """
    candidates = [
        ("Late-game uncertainty", features.time_weighted_uncertainty),
        ("Sustained competition", features.uncertainty_persistence * 100),
        ("Peak drama moments", features.peak_uncertainty),
        ("Comeback dynamics", features.comeback_factor),
        ("High-pressure situations", features.situational_tension),
    ]

    if features.lead_changes >= 2:
        candidates.append(("Frequent lead changes", features.lead_changes * 20))

    if factors.stakes_multiplier > 1.05:
        candidates.append(("High stakes setting", (factors.stakes_multiplier - 1) * 120))

    if factors.quality_factor > 1.05:
        candidates.append(("Quality of play", (factors.quality_factor - 1) * 100))

    if features.probability_noise <= 12 and features.time_weighted_uncertainty >= 24:
        candidates.append(("Composed finish", (30 - features.probability_noise) * 5))

    ranked = sorted(candidates, key=lambda item: item[1], reverse=True)
    return [name for name, _ in ranked[:MAX_KEY_FACTORS]]


def key_moments_from_breakdown(breakdown: dict[str, float]) -> list[str]:
    """Headline moments implied by a scored breakdown."""
    moments = []

    if breakdown.get("comeback", 0) > 7:
        moments.append("Major momentum shift identified")
    if breakdown.get("tension", 0) > 7:
        moments.append("High-pressure situation in final period")
    if breakdown.get("peaks", 0) > 7:
        moments.append("Critical uncertainty peak reached")
    if breakdown.get("stakes", 0) > 1.1:
        moments.append("High-stakes implications")
    if breakdown.get("noise", 0) >= 0.95:
        moments.append("Clean finish without chaos")

    return moments[:MAX_KEY_MOMENTS]
