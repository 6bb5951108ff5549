"""
Adaptive weighting of the seven sub-scores.

Starts from the configured base weights and nudges them according to the
shape of the extracted features: a game decided by many lead changes leans
less on its finish, a comeback game leans on comeback dynamics, and so on.
Nudges are additive and the result is not renormalized.
"""

from __future__ import annotations

from game_excitement.engine.config import ScoringConfig
from game_excitement.engine.features import FeatureSet


COMPONENTS = (
    "uncertainty",
    "persistence",
    "peaks",
    "comeback",
    "tension",
    "narrative",
    "dramatic_finish",
)

# (feature, threshold, inclusive, {component: delta})
WEIGHT_NUDGES = (
    ("lead_changes", 6, True, {"dramatic_finish": -0.04, "persistence": 0.02, "peaks": 0.02}),
    ("comeback_factor", 40, False, {"comeback": 0.08, "uncertainty": -0.04, "persistence": -0.04}),
    ("situational_tension", 24, False, {"tension": 0.08, "peaks": -0.04, "narrative": -0.04}),
    ("probability_noise", 18, False, {"peaks": -0.04, "comeback": -0.02, "narrative": 0.06}),
)


def calculate_adaptive_weights(
    features: FeatureSet, config: ScoringConfig | None = None
) -> dict[str, float]:
    """
    Weight vector for combining sub-scores.

    Args:
        features: Extracted features for the game
        config: Scoring config holding the base weights

    Returns:
        Dict of component -> weight
    """
    config = config or ScoringConfig()
    weights = {name: config.base_weights[name] for name in COMPONENTS}

    for feature, threshold, inclusive, deltas in WEIGHT_NUDGES:
        value = getattr(features, feature)
        triggered = value >= threshold if inclusive else value > threshold
        if not triggered:
            continue
        for component, delta in deltas.items():
            weights[component] += delta

    return weights
