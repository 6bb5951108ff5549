"""
Sample preprocessing for probability series.

Turns parsed RawSamples into ProbabilitySamples on a consistent percentage
scale, fills in missing clocks and removes medium-sized single-sample jitter
with a bounded local smoothing pass.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from game_excitement.engine.config import ScoringConfig
from game_excitement.engine.data import ProbabilitySample, RawSample, to_number
from game_excitement.utils.constants import (
    DEFAULT_GAME_SECONDS,
    NEUTRAL_PROBABILITY,
    PROBABILITY_CEILING,
    PROBABILITY_FLOOR,
)


def normalize_win_probability(value) -> float:
    """
    Normalize a win probability to the [0.1, 99.9] percentage scale.

    Values at or below 1 are read as fractions. Missing or non-numeric values
    become an even 50.
    """
    numeric = to_number(value)
    if numeric is None:
        return NEUTRAL_PROBABILITY

    percent = numeric * 100 if numeric <= 1 else numeric
    return max(PROBABILITY_FLOOR, min(PROBABILITY_CEILING, percent))


def estimate_time_remaining(
    index: int, total_length: int, game_seconds: float = DEFAULT_GAME_SECONDS
) -> float:
    """Linear clock estimate from a sample's position in the series."""
    if total_length <= 0:
        return game_seconds
    progress = index / total_length
    return max(0.0, game_seconds * (1 - progress))


def smooth_probabilities(
    probabilities: Sequence[float] | np.ndarray,
    radius: int = 3,
    band: tuple[float, float] = (15.0, 30.0),
    blend: float = 0.7,
) -> np.ndarray:
    """
    Bounded local smoothing.

    Each interior sample (at least ``radius`` away from both ends) is compared
    with the mean of the window of ``radius`` samples on each side, itself
    included. Only deviations strictly inside ``band`` are pulled toward the
    window mean; small moves and genuine large swings pass through untouched.
    Samples are updated left to right, so later windows see values that were
    already pulled in. The input itself is never modified.

    Args:
        probabilities: Normalized probabilities (percentage scale)
        radius: Window radius in samples
        band: Open interval of deviations that get smoothed
        blend: Weight kept by the original sample

    Returns:
        New array of smoothed probabilities
    """
    values = np.asarray(probabilities, dtype=float)
    smoothed = values.copy()
    low, high = band

    for i in range(radius, len(values) - radius):
        window_mean = smoothed[i - radius:i + radius + 1].mean()
        deviation = abs(smoothed[i] - window_mean)
        if low < deviation < high:
            smoothed[i] = blend * smoothed[i] + (1 - blend) * window_mean

    return smoothed


def preprocess_samples(
    raw_samples: Sequence[RawSample] | None,
    config: ScoringConfig | None = None,
) -> list[ProbabilitySample]:
    """
    Clean a parsed probability series.

    Args:
        raw_samples: Parsed samples in time order (None means no series)
        config: Scoring config (smoothing parameters, default game length)

    Returns:
        List of ProbabilitySample, one per input sample
    """
    config = config or ScoringConfig()
    if not raw_samples:
        return []

    n = len(raw_samples)
    probabilities = np.array(
        [normalize_win_probability(s.probability) for s in raw_samples], dtype=float
    )
    smoothed = smooth_probabilities(
        probabilities,
        radius=config.smoothing_radius,
        band=config.smoothing_band,
        blend=config.smoothing_blend,
    )

    samples = []
    for index, (raw, probability) in enumerate(zip(raw_samples, smoothed)):
        if raw.time_remaining is not None:
            remaining = raw.time_remaining
        else:
            remaining = estimate_time_remaining(index, n, config.default_game_seconds)

        samples.append(ProbabilitySample(
            probability=float(probability),
            period=raw.period or 1,
            time_remaining_seconds=float(remaining),
            sequence_index=index,
            home_score=raw.home_score,
            away_score=raw.away_score,
        ))

    return samples


def has_sufficient_data(samples: Sequence | None, config: ScoringConfig | None = None) -> bool:
    """Whether a cleaned series is long enough for the feature extractors."""
    min_samples = (config or ScoringConfig()).min_samples
    return samples is not None and len(samples) >= min_samples
