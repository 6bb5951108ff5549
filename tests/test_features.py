"""
Tests for the feature extractors.
"""

import numpy as np
import pytest

from game_excitement.engine.data import GameFacts
from game_excitement.engine.features import (
    assess_climax,
    assess_mid_game,
    assess_opening,
    assess_resolution,
    balance,
    comeback_factor,
    dramatic_finish,
    extract_features,
    find_uncertainty_peaks,
    lead_changes,
    narrative_flow,
    peak_uncertainty,
    probability_lead_changes,
    probability_noise,
    scoreboard_lead_changes,
    situational_tension,
    time_weighted_uncertainty,
    uncertainty_persistence,
    volatility,
)


class TestHelpers:
    """Test shared feature helpers."""

    def test_balance(self):
        """Balance is 50 at an even game and 0 at certainty."""
        assert balance(50.0) == 50.0
        assert balance(80.0) == 20.0
        assert balance(5.0) == 5.0

    def test_volatility(self):
        """Volatility is the RMS of consecutive differences."""
        assert volatility([50, 60, 50]) == pytest.approx(10.0)
        assert volatility([50]) == 0.0


class TestTimeWeightedUncertainty:
    """Test late-weighted average balance."""

    def test_constant_series(self, make_samples):
        """A constant series returns its balance."""
        assert time_weighted_uncertainty(make_samples([70] * 20)) == pytest.approx(30.0)

    def test_late_uncertainty_weighs_more(self, make_samples):
        """The same balance late in the game counts more than early."""
        early = make_samples([50] * 10 + [95] * 10)
        late = make_samples([95] * 10 + [50] * 10)
        assert time_weighted_uncertainty(late) > time_weighted_uncertainty(early)


class TestPersistence:
    """Test contested streak persistence."""

    def test_short_streaks_ignored(self, make_samples):
        """Streaks shorter than five samples do not count."""
        series = ([50] * 4 + [90]) * 4
        assert uncertainty_persistence(make_samples(series)) == 0.0

    def test_streaks_counted(self, make_samples):
        """Qualifying streaks count in full, including a trailing one."""
        series = [50] * 5 + [90] * 5 + [55] * 6 + [99] * 4
        assert uncertainty_persistence(make_samples(series)) == pytest.approx(11 / 20)


class TestPeaks:
    """Test uncertainty peak detection."""

    def test_single_peak(self, make_samples):
        """A local balance maximum above 25 is a peak."""
        series = [90, 85, 80, 70, 55, 70, 80, 85, 90]
        peaks = find_uncertainty_peaks(make_samples(series))
        assert peaks == [(4, 45.0)]

    def test_plateau_does_not_repeat(self, make_samples):
        """A flat plateau with no lower neighbour is not a run of peaks."""
        assert find_uncertainty_peaks(make_samples([50] * 12)) == []

    def test_no_peaks_scores_zero(self, make_samples):
        """Lopsided games have zero peak uncertainty."""
        assert peak_uncertainty(make_samples([95] * 12)) == 0.0

    def test_late_peaks_weighted(self, make_samples):
        """Peak heights are scaled by late-game weight."""
        series = [90, 85, 80, 70, 55, 70, 80, 85, 90, 90]
        expected = 45.0 * np.exp(1.5 * 4 / 10)
        assert peak_uncertainty(make_samples(series)) == pytest.approx(expected)


class TestComeback:
    """Test comeback dynamics."""

    def test_flat_series(self, make_samples, blowout_facts):
        """No swings means no comeback."""
        assert comeback_factor(make_samples([80] * 30), blowout_facts) == 0.0

    def test_single_late_swing(self, make_samples):
        """One late swing counts toward max, count and late max."""
        series = [20] * 19 + [80]
        facts = GameFacts(home_team="A", away_team="B", home_score=20, away_score=10)
        # swing 60 at index 19 (progress 0.95)
        assert comeback_factor(make_samples(series), facts) == pytest.approx(60 * 0.4 + 5 + 60 * 0.6)

    def test_close_final_multiplier(self, make_samples):
        """Margins of three or less scale the factor by 1.5."""
        series = [20] * 19 + [80]
        close = GameFacts(home_team="A", away_team="B", home_score=20, away_score=17)
        assert comeback_factor(make_samples(series), close) == pytest.approx(65 * 1.5)


class TestTension:
    """Test situational tension."""

    def test_tiers(self, make_samples):
        """Balance is weighted by game phase."""
        series = [50] * 20
        expected = (16 * 50 * 0.8 + 3 * 50 * 1.3 + 1 * 50 * 2.0) / 20
        assert situational_tension(make_samples(series)) == pytest.approx(expected)

    def test_lopsided(self, make_samples):
        """Balance below every threshold contributes nothing."""
        assert situational_tension(make_samples([90] * 20)) == 0.0


class TestLeadChanges:
    """Test probability and scoreboard lead changes."""

    def test_probability_counter(self, make_samples):
        """Exactly 50 keeps the previous favourite."""
        series = [60, 50, 40, 50, 45, 55, 70]
        assert probability_lead_changes(make_samples(series)) == 2

    def test_scoreboard_none_without_scores(self, make_samples):
        """No embedded scores means the scoreboard counter is unavailable."""
        assert scoreboard_lead_changes(make_samples([60, 40, 60])) is None

    def test_scoreboard_skips_ties(self, make_samples):
        """Tied scores are skipped rather than counted."""
        scores = [(0, 0), (7, 0), (7, 7), (7, 10), (14, 10), (14, 10)]
        samples = make_samples([60] * 6, scores=scores)
        assert scoreboard_lead_changes(samples) == 2

    def test_larger_source_wins(self, make_samples):
        """The reported total is the larger of the two counters."""
        scores = [(0, 0), (7, 0), (7, 10), (14, 10), (14, 17), (21, 17)]
        samples = make_samples([60, 60, 60, 40, 60, 60], scores=scores)
        summary = lead_changes(samples)
        assert summary.probability == 2
        assert summary.scoreboard == 4
        assert summary.total == 4
        assert summary.breakdown() == {"probability": 2, "scoreboard": 4}

    def test_monotone_in_both_counters(self, make_samples):
        """The total is never below either counter."""
        scores = [(3, 0), (3, 7)]
        samples = make_samples([40, 60, 40, 60], scores=scores + [(None, None)] * 2)
        summary = lead_changes(samples)
        assert summary.total >= summary.probability
        assert summary.total >= summary.scoreboard


class TestNoiseAndFinish:
    """Test probability noise and dramatic finish."""

    def test_noise_is_mean_absolute_change(self, make_samples):
        """Noise averages absolute moves."""
        assert probability_noise(make_samples([50, 60, 50, 50])) == pytest.approx(20 / 3)
        assert probability_noise(make_samples([50])) == 0.0

    def test_dramatic_finish(self, make_samples):
        """The largest move in the last 10% is scaled by 0.2."""
        series = [50] * 18 + [40, 90]
        assert dramatic_finish(make_samples(series)) == pytest.approx(10.0)

        series = [50] * 18 + [50, 70]
        assert dramatic_finish(make_samples(series)) == pytest.approx(4.0)

    def test_dramatic_finish_short_tail(self, make_samples):
        """Fewer than two tail samples gives no dramatic finish."""
        assert dramatic_finish(make_samples([50] * 18 + [99])) == 0.0


class TestNarrativeFlow:
    """Test the four-phase narrative assessment."""

    def test_opening(self, make_samples):
        """Early favourites read as a flat start, even starts as lively."""
        assert assess_opening(make_samples([90] * 20)) == 3.0
        assert assess_opening(make_samples([50] * 20)) == 7.0
        assert assess_opening(make_samples([75] * 20)) == 5.0
        assert assess_opening(make_samples([50] * 4)) == 5.0

    def test_mid_game_flat(self, make_samples):
        """A static middle has no movement."""
        assert assess_mid_game(make_samples([60] * 20)) == 0.0

    def test_climax_capped(self, make_samples):
        """Climax intensity is capped at 10."""
        series = [50] * 15 + [10, 90, 10, 90, 10]
        assert assess_climax(make_samples(series)) <= 10.0

    def test_resolution(self, make_samples):
        """Overtime, tight finishes and runaways resolve differently."""
        even = make_samples([50] * 20)
        lopsided = make_samples([99] * 20)

        ot = GameFacts(home_team="A", away_team="B", home_score=42, away_score=36, overtime=True)
        tight = GameFacts(home_team="A", away_team="B", home_score=21, away_score=20)
        runaway = GameFacts(home_team="A", away_team="B", home_score=45, away_score=10)

        assert assess_resolution(lopsided, ot) == 9.0
        assert assess_resolution(even, tight) == 8.5
        assert assess_resolution(lopsided, tight) == 5.5
        assert assess_resolution(lopsided, runaway) == 2.0

    def test_flow_score_weights(self, make_samples, close_facts):
        """The narrative score is the phase-weighted sum."""
        flow = narrative_flow(make_samples([50] * 20), close_facts)
        expected = (
            flow.opening * 0.15 + flow.mid_game * 0.25
            + flow.climax * 0.45 + flow.resolution * 0.15
        )
        assert flow.score == pytest.approx(expected)


class TestExtractFeatures:
    """Test the bundled feature extraction."""

    def test_swing_game(self, make_samples, swing_series, close_facts):
        """A late-swinging game has two lead changes and a dramatic finish."""
        features = extract_features(make_samples(swing_series), close_facts)

        assert features.lead_changes == 2
        assert features.lead_change_breakdown == {"probability": 2}
        assert features.dramatic_finish == pytest.approx(38.3 * 0.2)
        assert features.narrative_flow.resolution == 7.0
        assert 0 <= features.uncertainty_persistence <= 1

    def test_features_bounded(self, make_samples, close_facts):
        """Every feature respects its bounds on a wild series."""
        series = [0.1, 99.9] * 60
        features = extract_features(make_samples(series), close_facts)

        assert features.comeback_factor <= 500
        assert features.probability_noise <= 100
        assert features.dramatic_finish <= 10
        assert features.narrative <= 10
        assert features.peak_uncertainty <= 225
