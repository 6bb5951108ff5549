"""Shared constants for the excitement engine."""

# Fewer cleaned samples than this routes a game to the fallback model
MIN_SAMPLES = 10

# Probability scale (percentage points) after normalization
PROBABILITY_FLOOR = 0.1
PROBABILITY_CEILING = 99.9
NEUTRAL_PROBABILITY = 50.0

# Clock assumed when a sample carries no time remaining (one 60 minute game)
DEFAULT_GAME_SECONDS = 3600.0

# Bounds applied to every extracted feature before combination
FEATURE_BOUNDS = {
    "time_weighted_uncertainty": (0.0, 50.0),
    "uncertainty_persistence": (0.0, 1.0),
    "peak_uncertainty": (0.0, 225.0),  # 50 * e^1.5
    "comeback_factor": (0.0, 500.0),
    "situational_tension": (0.0, 100.0),
    "lead_changes": (0, 100),
    "probability_noise": (0.0, 100.0),
    "dramatic_finish": (0.0, 10.0),
    "narrative": (0.0, 10.0),
}

# Output range of the excitement score
SCORE_FLOOR = 0.5
SCORE_CEILING = 9.8

# Viewing recommendation tiers (minimum score, label)
TIERS = (
    (8.0, "must watch"),
    (6.0, "recommended"),
    (0.0, "skip"),
)

# Sports whose probability feeds update per possession (denser series)
HIGH_FREQUENCY_SPORTS = frozenset({"NBA", "CBB", "WNBA"})


def get_tier(score: float) -> str:
    """Return the viewing tier label for a score."""
    for minimum, label in TIERS:
        if score >= minimum:
            return label
    return TIERS[-1][1]
