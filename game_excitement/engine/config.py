"""
Configuration for the excitement scoring pipeline.

All tunable constants of the engine live on ``ScoringConfig`` so a caller can
experiment with alternative weights or thresholds without touching the
extractors. The defaults are the canonical GEI constants.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path

from game_excitement.utils.constants import DEFAULT_GAME_SECONDS, MIN_SAMPLES, SCORE_CEILING, SCORE_FLOOR


def _default_weights() -> dict[str, float]:
    return {
        "uncertainty": 0.20,
        "persistence": 0.13,
        "peaks": 0.16,
        "comeback": 0.12,
        "tension": 0.12,
        "narrative": 0.11,
        "dramatic_finish": 0.16,
    }


@dataclass
class ScoringConfig:
    """Configuration for the excitement engine."""

    # Data sufficiency
    min_samples: int = MIN_SAMPLES
    default_game_seconds: float = DEFAULT_GAME_SECONDS

    # Bounded local smoothing
    smoothing_radius: int = 3
    smoothing_band: tuple[float, float] = (15.0, 30.0)  # open interval, points
    smoothing_blend: float = 0.7  # weight kept by the original sample

    # Base weights over the seven sub-scores (sum to 1.0)
    base_weights: dict[str, float] = field(default_factory=_default_weights)

    # Sub-score transforms
    sub_score_scale: float = 8.5
    uncertainty_midpoint: float = 28.0
    peak_midpoint: float = 26.0
    comeback_midpoint: float = 30.0
    tension_midpoint: float = 18.0
    persistence_ceiling: float = 0.4  # persistence at which the sub-score saturates

    # Noise penalty
    noise_floor: float = 8.0
    noise_ceiling: float = 30.0
    max_noise_penalty: float = 0.25

    # Compression of the contextual product into the output range
    compression_offset: float = 1.0
    compression_slope: float = 0.85
    score_floor: float = SCORE_FLOOR
    score_ceiling: float = SCORE_CEILING

    # Confidence
    base_confidence: float = 0.8
    confidence_step: float = 0.04

    # Fallback model
    fallback_ceiling: float = 10.0

    def __post_init__(self):
        missing = set(_default_weights()) - set(self.base_weights)
        if missing:
            raise ValueError(f"base_weights missing components: {sorted(missing)}")
        self.smoothing_band = tuple(self.smoothing_band)

    @classmethod
    def from_dict(cls, overrides: dict) -> ScoringConfig:
        """
        Build a config from a dict of overrides.

        Args:
            overrides: Field name -> value. ``base_weights`` may be partial;
                missing components keep their default weight.

        Returns:
            ScoringConfig with the overrides applied

        Raises:
            ValueError: If a key is not a config field
        """
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown scoring config keys: {sorted(unknown)}")

        values = dict(overrides)
        if "base_weights" in values:
            weights = _default_weights()
            weights.update(values["base_weights"])
            values["base_weights"] = weights

        return cls(**values)

    @classmethod
    def from_file(cls, path: Path | str) -> ScoringConfig:
        """Load config overrides from a JSON file."""
        with open(path) as f:
            return cls.from_dict(json.load(f))
