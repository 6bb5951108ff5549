"""
Data quality checks for win probability series.

Flags series whose shape suggests the excitement score may be wrong:
- Too few samples to analyse at all
- Trailing post-game noise (final probability not settled near 0% or 100%)
- Close final score with no probability lead changes (drama missing)
- Overtime game with no late crossings of 50%
- Sparse series that may skip key moments
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Sequence

import numpy as np

from game_excitement.engine.data import GameFacts, ProbabilitySample
from game_excitement.utils.constants import HIGH_FREQUENCY_SPORTS, MIN_SAMPLES, NEUTRAL_PROBABILITY

Severity = Literal["none", "low", "medium", "high"]

SEVERITY_ORDER = ("none", "low", "medium", "high")

# Final probability strictly inside this band (percentage) counts as unsettled
SETTLED_BAND = (5.0, 95.0)

# Progress from which the series is treated as the overtime window
OVERTIME_WINDOW_START = 0.85


@dataclass(frozen=True)
class DataQualityIssue:
    type: str
    severity: Severity
    message: str


@dataclass
class DataQualityReport:
    """Issues found in one series, with the worst severity."""

    issues: list[DataQualityIssue] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        return len(self.issues) > 0

    @property
    def severity(self) -> Severity:
        if not self.issues:
            return "none"
        return max((issue.severity for issue in self.issues), key=SEVERITY_ORDER.index)

    def summary(self) -> str:
        return format_data_quality_warning(self)


def count_crossings(probabilities: Sequence[float] | np.ndarray) -> int:
    """Number of consecutive pairs on opposite sides of 50%."""
    values = np.asarray(probabilities, dtype=float) - NEUTRAL_PROBABILITY
    if len(values) < 2:
        return 0
    return int(np.sum(values[:-1] * values[1:] < 0))


def detect_data_quality_issues(
    samples: Sequence[ProbabilitySample] | None,
    facts: GameFacts | None = None,
    sport: str = "NFL",
) -> DataQualityReport:
    """
    Detect potential issues with a cleaned probability series.

    Args:
        samples: Cleaned samples (percentage scale)
        facts: Game facts, for margin and overtime checks
        sport: Sport tag; dense-feed sports use wider thresholds

    Returns:
        DataQualityReport
    """
    report = DataQualityReport()

    if not samples or len(samples) < MIN_SAMPLES:
        report.issues.append(DataQualityIssue(
            type="insufficient-data",
            severity="high",
            message="Insufficient probability data points",
        ))
        return report

    dense_feed = sport.upper() in HIGH_FREQUENCY_SPORTS
    probabilities = np.array([s.probability for s in samples], dtype=float)

    final = probabilities[-1]
    low, high = SETTLED_BAND
    if low < final < high:
        report.issues.append(DataQualityIssue(
            type="trailing-noise",
            severity="high",
            message=(
                f"Final win probability is {final:.0f}% instead of near 0% or 100% "
                "- data may include post-game noise"
            ),
        ))

    if facts is not None:
        margin = facts.margin
        crossings = count_crossings(probabilities)
        close_threshold = 10 if dense_feed else 7

        if margin <= close_threshold and crossings == 0:
            report.issues.append(DataQualityIssue(
                type="missing-drama",
                severity="high",
                message=(
                    f"Close game ({margin}-point margin) but 0 lead changes detected "
                    "- dramatic moments may be missing from probability data"
                ),
            ))

        if margin <= 3 and crossings == 1:
            report.issues.append(DataQualityIssue(
                type="low-drama-for-margin",
                severity="medium",
                message=(
                    f"One-possession game ({margin} pts) but only 1 lead change "
                    "- data may be incomplete"
                ),
            ))

        if facts.overtime:
            window = probabilities[int(len(probabilities) * OVERTIME_WINDOW_START):]
            if count_crossings(window) == 0:
                report.issues.append(DataQualityIssue(
                    type="ot-no-crossings",
                    severity="medium",
                    message="Overtime game but no late lead changes in probability data",
                ))

    min_expected = 200 if dense_feed else 150
    if len(samples) < min_expected:
        report.issues.append(DataQualityIssue(
            type="sparse-data",
            severity="low",
            message=(
                f"Only {len(samples)} data points (expected {min_expected}+) "
                "- score may not capture all moments"
            ),
        ))

    return report


def format_data_quality_warning(report: DataQualityReport | None) -> str:
    """Join issue messages for display."""
    if report is None or not report.has_issues:
        return ""
    return "; ".join(issue.message for issue in report.issues)
