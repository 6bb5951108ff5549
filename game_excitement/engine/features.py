"""
Feature extractors over a cleaned probability series.

Every extractor is a pure function of the cleaned samples (and, where the
final score matters, the GameFacts). They share no state and may run in any
order. All work in percentage points; the "balance" of a sample is
``max(0, 50 - |p - 50|)``: 50 for a dead-even game, 0 for a certainty.

Extractors:
- time_weighted_uncertainty: balance averaged with late-game emphasis
- uncertainty_persistence: share of the game spent in long contested streaks
- peak_uncertainty: height of local balance maxima, late peaks weighted up
- comeback_factor: size, count and timing of 10-sample probability swings
- situational_tension: balance with tiered late-game weights
- lead_changes: probability and scoreboard lead changes (larger wins)
- probability_noise: mean sample-to-sample movement
- dramatic_finish: largest single move in the final 10% of samples
- narrative_flow: opening / mid-game / climax / resolution assessment
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from game_excitement.engine.data import GameFacts, ProbabilitySample
from game_excitement.utils.constants import FEATURE_BOUNDS, NEUTRAL_PROBABILITY


# Persistence
PERSISTENCE_BALANCE = 30.0
PERSISTENCE_MIN_STREAK = 5

# Peaks
PEAK_MIN_BALANCE = 25.0
PEAK_RADIUS = 2

# Comebacks
COMEBACK_LAG = 10
COMEBACK_MIN_SWING = 25.0
LATE_GAME_PROGRESS = 0.75

# Narrative flow
OPENING_SAMPLES = 20
MID_GAME_SHIFT = 8.0
RESOLUTION_SAMPLES = 5
PHASE_WEIGHTS = {
    "opening": 0.15,
    "mid_game": 0.25,
    "climax": 0.45,
    "resolution": 0.15,
}


# ============================================================================
# Helpers
# ============================================================================


def probabilities_of(samples: Sequence[ProbabilitySample]) -> np.ndarray:
    return np.array([s.probability for s in samples], dtype=float)


def balance(probability):
    """Closeness to an even game: 50 at 50%, 0 at either extreme."""
    return np.maximum(0.0, NEUTRAL_PROBABILITY - np.abs(np.asarray(probability) - NEUTRAL_PROBABILITY))


def balances_of(samples: Sequence[ProbabilitySample]) -> np.ndarray:
    return balance(probabilities_of(samples))


def progress_of(n: int) -> np.ndarray:
    """Game progress ``i / n`` for each sample index."""
    return np.arange(n) / n if n else np.zeros(0)


def volatility(values: Sequence[float] | np.ndarray) -> float:
    """Root-mean-square of consecutive differences."""
    values = np.asarray(values, dtype=float)
    if len(values) < 2:
        return 0.0
    return float(np.sqrt(np.mean(np.diff(values) ** 2)))


def late_game_weight(index: int, total_length: int) -> float:
    """Exponential emphasis on late samples, from 1 up to e^1.5."""
    return float(np.exp(1.5 * index / total_length))


def _clamp(value: float, name: str) -> float:
    low, high = FEATURE_BOUNDS[name]
    return min(high, max(low, value))


# ============================================================================
# Extractors
# ============================================================================


def time_weighted_uncertainty(samples: Sequence[ProbabilitySample]) -> float:
    """Weighted mean balance, weight ``e^(2 * progress)``."""
    if not samples:
        return 0.0

    weights = np.exp(2 * progress_of(len(samples)))
    return float(np.sum(balances_of(samples) * weights) / np.sum(weights))


def uncertainty_persistence(samples: Sequence[ProbabilitySample]) -> float:
    """
    Fraction of samples inside contested streaks.

    A streak is at least 5 consecutive samples with balance >= 30; shorter
    runs do not count at all.
    """
    if not samples:
        return 0.0

    persistent = 0
    streak = 0
    for value in balances_of(samples):
        if value >= PERSISTENCE_BALANCE:
            streak += 1
            continue
        if streak >= PERSISTENCE_MIN_STREAK:
            persistent += streak
        streak = 0

    if streak >= PERSISTENCE_MIN_STREAK:
        persistent += streak

    return persistent / len(samples)


def find_uncertainty_peaks(samples: Sequence[ProbabilitySample]) -> list[tuple[int, float]]:
    """
    Locate local maxima of balance.

    A peak is above 25, no lower than any sample within 2 on either side, and
    strictly higher than at least one adjacent sample (so flat plateaus do not
    produce a run of peaks).

    Returns:
        List of (index, balance) pairs
    """
    values = balances_of(samples)
    peaks = []

    for i in range(PEAK_RADIUS, len(values) - PEAK_RADIUS):
        current = values[i]
        neighbours = np.concatenate([values[i - PEAK_RADIUS:i], values[i + 1:i + PEAK_RADIUS + 1]])

        if (
            current > PEAK_MIN_BALANCE
            and np.all(current >= neighbours)
            and (current > values[i - 1] or current > values[i + 1])
        ):
            peaks.append((i, float(current)))

    return peaks


def peak_uncertainty(samples: Sequence[ProbabilitySample]) -> float:
    """Mean late-weighted peak balance (0 when there are no peaks)."""
    peaks = find_uncertainty_peaks(samples)
    if not peaks:
        return 0.0

    n = len(samples)
    weighted = [height * late_game_weight(index, n) for index, height in peaks]
    return float(np.mean(weighted))


def comeback_factor(samples: Sequence[ProbabilitySample], facts: GameFacts) -> float:
    """
    Comeback dynamics from 10-sample-lagged probability swings.

    Swings above 25 points are comeback events. The largest swing, the event
    count and the largest swing after 75% progress combine as
    ``0.4 * max + 5 * count + 0.6 * late_max``, scaled up for close finals.
    """
    probabilities = probabilities_of(samples)
    n = len(probabilities)

    max_swing = 0.0
    late_swing = 0.0
    count = 0

    for i in range(COMEBACK_LAG, n):
        swing = abs(probabilities[i] - probabilities[i - COMEBACK_LAG])
        if swing <= COMEBACK_MIN_SWING:
            continue

        count += 1
        max_swing = max(max_swing, swing)
        if i / n > LATE_GAME_PROGRESS:
            late_swing = max(late_swing, swing)

    margin = facts.margin
    if margin <= 3:
        margin_multiplier = 1.5
    elif margin <= 7:
        margin_multiplier = 1.2
    else:
        margin_multiplier = 1.0

    return float((max_swing * 0.4 + count * 5 + late_swing * 0.6) * margin_multiplier)


def situational_tension(samples: Sequence[ProbabilitySample]) -> float:
    """Balance accumulated with tiered weights, normalized by sample count."""
    if not samples:
        return 0.0

    n = len(samples)
    tension = 0.0
    for index, value in enumerate(balances_of(samples)):
        progress = index / n
        if progress > 0.9 and value > 30:
            tension += value * 2.0
        elif progress > 0.75 and value > 25:
            tension += value * 1.3
        elif value > 20:
            tension += value * 0.8

    return tension / n


def probability_lead_changes(samples: Sequence[ProbabilitySample]) -> int:
    """Count changes of favourite; samples at exactly 50 keep the last leader."""
    changes = 0
    last_leader = None

    for sample in samples:
        if sample.probability > NEUTRAL_PROBABILITY:
            leader = "home"
        elif sample.probability < NEUTRAL_PROBABILITY:
            leader = "away"
        else:
            continue

        if last_leader is not None and leader != last_leader:
            changes += 1
        last_leader = leader

    return changes


def scoreboard_lead_changes(samples: Sequence[ProbabilitySample]) -> int | None:
    """
    Count lead changes on the embedded running score.

    Ties are skipped. Returns None when no sample carries both scores, so the
    caller can tell "no changes" from "no scoreboard".
    """
    changes = 0
    last_leader = None
    saw_score = False

    for sample in samples:
        if not sample.has_scoreboard:
            continue

        saw_score = True
        if sample.home_score == sample.away_score:
            continue

        leader = "home" if sample.home_score > sample.away_score else "away"
        if last_leader is not None and leader != last_leader:
            changes += 1
        last_leader = leader

    return changes if saw_score else None


@dataclass(frozen=True)
class LeadChangeSummary:
    """Lead changes reported by each available source."""

    total: int
    probability: int
    scoreboard: int | None = None

    def breakdown(self) -> dict[str, int]:
        sources = {"probability": self.probability}
        if self.scoreboard is not None:
            sources["scoreboard"] = self.scoreboard
        return sources


def lead_changes(samples: Sequence[ProbabilitySample]) -> LeadChangeSummary:
    """Lead changes from both counters; the larger is reported."""
    from_probability = probability_lead_changes(samples)
    from_scoreboard = scoreboard_lead_changes(samples)

    total = from_probability
    if from_scoreboard is not None:
        total = max(from_scoreboard, from_probability)

    return LeadChangeSummary(
        total=total,
        probability=from_probability,
        scoreboard=from_scoreboard,
    )


def probability_noise(samples: Sequence[ProbabilitySample]) -> float:
    """Mean absolute change between consecutive samples."""
    if len(samples) < 2:
        return 0.0
    return float(np.mean(np.abs(np.diff(probabilities_of(samples)))))


def dramatic_finish(samples: Sequence[ProbabilitySample]) -> float:
    """Largest consecutive move in the final 10% of samples, scaled to 0-10."""
    tail_length = int(len(samples) * 0.1)
    if tail_length < 2:
        return 0.0

    tail = probabilities_of(samples[-tail_length:])
    max_swing = float(np.max(np.abs(np.diff(tail))))
    return min(10.0, max_swing * 0.2)


# ============================================================================
# Narrative flow
# ============================================================================


@dataclass(frozen=True)
class NarrativeFlow:
    """Four-phase assessment of how a game unfolded (each 0-10)."""

    opening: float
    mid_game: float
    climax: float
    resolution: float

    @property
    def score(self) -> float:
        return (
            self.opening * PHASE_WEIGHTS["opening"]
            + self.mid_game * PHASE_WEIGHTS["mid_game"]
            + self.climax * PHASE_WEIGHTS["climax"]
            + self.resolution * PHASE_WEIGHTS["resolution"]
        )


def assess_opening(samples: Sequence[ProbabilitySample]) -> float:
    """Tone of the first 20 samples: an early favourite reads as a flat start."""
    opening = samples[:OPENING_SAMPLES]
    if len(opening) < 5:
        return 5.0

    early_balance = float(np.mean(balances_of(opening)))
    if early_balance < 20:
        return 3.0
    if early_balance > 30:
        return 7.0
    return 5.0


def assess_mid_game(samples: Sequence[ProbabilitySample]) -> float:
    """Movement between 30% and 70% progress, with a bonus for big shifts."""
    n = len(samples)
    middle = probabilities_of(samples[int(n * 0.3):int(n * 0.7)])
    if len(middle) == 0:
        return 5.0

    moves = np.abs(np.diff(middle))
    average_movement = float(np.sum(moves)) / len(middle)
    shift_density = int(np.sum(moves > MID_GAME_SHIFT)) / len(middle)

    return min(10.0, average_movement * 0.3 + shift_density * 40)


def assess_climax(samples: Sequence[ProbabilitySample]) -> float:
    """Intensity of the final quarter of samples."""
    climax = samples[int(len(samples) * 0.75):]
    if not climax:
        return 5.0

    values = balances_of(climax)
    intensity = (
        float(np.max(values)) * 0.4
        + float(np.mean(values)) * 0.3
        + volatility(probabilities_of(climax)) * 0.3
    )
    return min(10.0, intensity / 5)


def assess_resolution(samples: Sequence[ProbabilitySample], facts: GameFacts) -> float:
    """How the game was settled: overtime, a tight finish, or a runaway."""
    final = samples[-RESOLUTION_SAMPLES:]
    if not final:
        return 5.0

    if facts.overtime:
        return 9.0

    final_balance = float(np.mean(balances_of(final)))
    margin = facts.margin

    if margin <= 3 and final_balance > 28:
        return 8.5
    if margin <= 7 and final_balance > 24:
        return 7.0
    if margin <= 14:
        return 5.5
    return max(2.0, 6.0 - margin * 0.2)


def narrative_flow(samples: Sequence[ProbabilitySample], facts: GameFacts) -> NarrativeFlow:
    return NarrativeFlow(
        opening=assess_opening(samples),
        mid_game=assess_mid_game(samples),
        climax=assess_climax(samples),
        resolution=assess_resolution(samples, facts),
    )


# ============================================================================
# Feature bundle
# ============================================================================


@dataclass(frozen=True)
class FeatureSet:
    """Output of every extractor for one game, each clamped to its bounds."""

    time_weighted_uncertainty: float
    uncertainty_persistence: float
    peak_uncertainty: float
    comeback_factor: float
    situational_tension: float
    lead_changes: int
    probability_noise: float
    dramatic_finish: float
    narrative: float
    lead_change_breakdown: dict[str, int] = field(default_factory=dict)
    narrative_flow: NarrativeFlow | None = None


def extract_features(samples: Sequence[ProbabilitySample], facts: GameFacts) -> FeatureSet:
    """
    Run every extractor over a cleaned series.

    Args:
        samples: Cleaned samples (at least the configured minimum)
        facts: Game facts (final margin and overtime)

    Returns:
        FeatureSet with bounded values
    """
    leads = lead_changes(samples)
    flow = narrative_flow(samples, facts)

    return FeatureSet(
        time_weighted_uncertainty=_clamp(time_weighted_uncertainty(samples), "time_weighted_uncertainty"),
        uncertainty_persistence=_clamp(uncertainty_persistence(samples), "uncertainty_persistence"),
        peak_uncertainty=_clamp(peak_uncertainty(samples), "peak_uncertainty"),
        comeback_factor=_clamp(comeback_factor(samples, facts), "comeback_factor"),
        situational_tension=_clamp(situational_tension(samples), "situational_tension"),
        lead_changes=int(_clamp(leads.total, "lead_changes")),
        probability_noise=_clamp(probability_noise(samples), "probability_noise"),
        dramatic_finish=_clamp(dramatic_finish(samples), "dramatic_finish"),
        narrative=_clamp(flow.score, "narrative"),
        lead_change_breakdown=leads.breakdown(),
        narrative_flow=flow,
    )
