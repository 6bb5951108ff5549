"""
Score combination and the top-level excitement entry point.

Implements the final stages of the pipeline:
- Bounded transforms of the raw features into 0-8.5 sub-scores
- Weighted combination under the adaptive weights
- Contextual multipliers and the noise penalty
- Linear compression into the [0.5, 9.8] output range
- Confidence from feature agreement

``compute_excitement`` runs the whole pipeline for one game and guarantees a
well-formed ScoreResult: short or missing series and any unexpected failure
route to the fallback model.
"""

from __future__ import annotations

import logging
import math
from typing import Mapping, Sequence

from scipy.special import expit

from game_excitement.engine.config import ScoringConfig
from game_excitement.engine.context import (
    ContextualFactors,
    GameContext,
    build_game_context,
    calculate_contextual_factors,
)
from game_excitement.engine.data import GameFacts, RawSample, parse_game_facts, parse_samples
from game_excitement.engine.fallback import contextual_fallback
from game_excitement.engine.features import FeatureSet, extract_features
from game_excitement.engine.narrative import (
    identify_key_factors,
    key_moments_from_breakdown,
    spoiler_free_description,
)
from game_excitement.engine.preprocessing import has_sufficient_data, preprocess_samples
from game_excitement.engine.result import ScoreResult
from game_excitement.engine.weighting import calculate_adaptive_weights

logger = logging.getLogger(__name__)


# ============================================================================
# Transforms
# ============================================================================


def sigmoid_transform(value: float, midpoint: float, scale: float) -> float:
    """Logistic map onto (0, scale), centred on midpoint with width 0.3 * midpoint."""
    return float(scale * expit((value - midpoint) / (midpoint * 0.3)))


def linear_transform(value: float, min_in: float, max_in: float, min_out: float, max_out: float) -> float:
    """Clamp value into [min_in, max_in] and map it linearly onto [min_out, max_out]."""
    clamped = max(min_in, min(max_in, value))
    return min_out + (clamped - min_in) * (max_out - min_out) / (max_in - min_in)


def noise_penalty(noise: float, config: ScoringConfig | None = None) -> float:
    """1.0 up to the noise floor, falling linearly to 0.75 at the ceiling."""
    config = config or ScoringConfig()
    if not noise or noise <= config.noise_floor:
        return 1.0
    if noise >= config.noise_ceiling:
        return 1.0 - config.max_noise_penalty

    scale = (noise - config.noise_floor) / (config.noise_ceiling - config.noise_floor)
    return 1.0 - scale * config.max_noise_penalty


def compute_sub_scores(features: FeatureSet, config: ScoringConfig | None = None) -> dict[str, float]:
    """Transform raw features into the seven weighted components."""
    config = config or ScoringConfig()
    scale = config.sub_score_scale

    return {
        "uncertainty": sigmoid_transform(features.time_weighted_uncertainty, config.uncertainty_midpoint, scale),
        "persistence": linear_transform(features.uncertainty_persistence, 0, config.persistence_ceiling, 0, scale),
        "peaks": sigmoid_transform(features.peak_uncertainty, config.peak_midpoint, scale),
        "comeback": sigmoid_transform(features.comeback_factor, config.comeback_midpoint, scale),
        "tension": sigmoid_transform(features.situational_tension, config.tension_midpoint, scale),
        "narrative": features.narrative,
        "dramatic_finish": features.dramatic_finish,
    }


# ============================================================================
# Confidence
# ============================================================================


def calculate_confidence(
    features: FeatureSet, factors: ContextualFactors, config: ScoringConfig | None = None
) -> float:
    """Base confidence plus a step for every informative signal, capped at 1."""
    config = config or ScoringConfig()

    gates = [
        features.time_weighted_uncertainty >= 28,
        features.uncertainty_persistence > 0.3,
        features.peak_uncertainty >= 24,
        features.comeback_factor > 25,
        features.situational_tension >= 16,
        factors.stakes_multiplier > 1.05,
        features.probability_noise <= 15,
    ]

    confidence = config.base_confidence + sum(gates) * config.confidence_step
    return min(1.0, max(0.0, confidence))


# ============================================================================
# Combination
# ============================================================================


def combine_scores(
    features: FeatureSet,
    factors: ContextualFactors,
    config: ScoringConfig | None = None,
) -> tuple[float, dict[str, float]]:
    """
    Combine features and contextual factors into the final score.

    Args:
        features: Extracted features
        factors: Contextual multipliers
        config: Scoring config

    Returns:
        (score, breakdown) where score is clamped to the output range and
        breakdown values are rounded to one decimal
    """
    config = config or ScoringConfig()

    sub_scores = compute_sub_scores(features, config)
    weights = calculate_adaptive_weights(features, config)
    penalty = noise_penalty(features.probability_noise, config)

    raw_score = sum(sub_scores[name] * weights[name] for name in weights)

    context_score = (
        raw_score
        * factors.scoring_context
        * factors.competitive_balance
        * factors.stakes_multiplier
        * factors.quality_factor
        * factors.expectation_adjustment
        * penalty
    )
    if not math.isfinite(context_score):
        raise ValueError(f"Non-finite excitement score: {context_score}")

    compressed = config.compression_offset + context_score * config.compression_slope
    score = min(config.score_ceiling, max(config.score_floor, compressed))

    breakdown = {name: round(value, 1) for name, value in sub_scores.items()}
    breakdown.update({
        "context": round(factors.scoring_context * factors.competitive_balance, 1),
        "stakes": round(factors.stakes_multiplier, 1),
        "quality": round(factors.quality_factor, 1),
        "expectation": round(factors.expectation_adjustment, 1),
        "noise": round(penalty, 1),
        "lead_changes": features.lead_changes,
    })

    return score, breakdown


def score_features(
    features: FeatureSet,
    facts: GameFacts,
    context: GameContext,
    config: ScoringConfig | None = None,
) -> ScoreResult:
    """Score a game from its extracted features."""
    config = config or ScoringConfig()
    factors = calculate_contextual_factors(facts, context)
    score, breakdown = combine_scores(features, factors, config)

    return ScoreResult(
        score=round(score, 1),
        confidence=calculate_confidence(features, factors, config),
        breakdown=breakdown,
        narrative=spoiler_free_description(features, facts, context),
        key_factors=identify_key_factors(features, factors),
        key_moments=key_moments_from_breakdown(breakdown),
    )


def compute_excitement(
    raw_samples: Sequence[RawSample] | None,
    facts: GameFacts,
    context: GameContext | None = None,
    config: ScoringConfig | None = None,
) -> ScoreResult:
    """
    Run the full excitement pipeline for one game.

    Args:
        raw_samples: Parsed probability series in time order, or None
        facts: Game facts
        context: Precomputed context (built from facts if omitted)
        config: Scoring config

    Returns:
        ScoreResult (from the fallback model when the series is missing,
        too short, or the computation fails)
    """
    config = config or ScoringConfig()
    context = context or build_game_context(facts)

    try:
        samples = preprocess_samples(raw_samples, config)

        if not has_sufficient_data(samples, config):
            logger.info(
                f"Insufficient probability data for {facts.away_team} @ {facts.home_team} "
                f"({len(samples)} samples), using fallback"
            )
            return contextual_fallback(facts, context, config)

        features = extract_features(samples, facts)
        return score_features(features, facts, context, config)

    except Exception:
        logger.exception(f"Excitement calculation failed for {facts.away_team} @ {facts.home_team}")
        return contextual_fallback(facts, context, config)


def score_game(
    probabilities: Sequence[Mapping | float] | None,
    game: Mapping | GameFacts,
    sport: str | None = None,
    config: ScoringConfig | None = None,
) -> ScoreResult:
    """
    Score a game straight from upstream records.

    Args:
        probabilities: Upstream probability records (dicts or bare numbers)
        game: Upstream game record or GameFacts
        sport: Sport tag (e.g. "NFL", "CFB", "NBA")
        config: Scoring config

    Returns:
        ScoreResult
    """
    facts = parse_game_facts(game, sport=sport)
    context = build_game_context(facts, sport)
    return compute_excitement(parse_samples(probabilities), facts, context, config)
