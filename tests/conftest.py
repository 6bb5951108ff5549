"""
Shared fixtures for excitement engine tests.
"""

import pytest

from game_excitement.engine.data import GameFacts, ProbabilitySample, RawSample


# Probability series of a 33-26 game that swung late
SWING_GAME_SERIES = [
    57.6, 56.0, 64.2, 62.5, 69.0, 72.2, 70.9, 68.7, 49.5, 48.9, 46.6, 42.0,
    41.9, 43.9, 38.6, 32.6, 29.1, 24.4, 17.6, 52.8, 73.1, 61.7, 100.0,
]


@pytest.fixture
def make_samples():
    """Factory building cleaned samples from a list of probabilities."""

    def _make(probabilities, scores=None):
        samples = []
        n = len(probabilities)
        for i, p in enumerate(probabilities):
            home, away = scores[i] if scores else (None, None)
            samples.append(ProbabilitySample(
                probability=float(p),
                period=1,
                time_remaining_seconds=3600.0 * (1 - i / n),
                sequence_index=i,
                home_score=home,
                away_score=away,
            ))
        return samples

    return _make


@pytest.fixture
def make_raw():
    """Factory building raw samples from a list of probabilities."""

    def _make(probabilities):
        return [RawSample(probability=p) for p in probabilities]

    return _make


@pytest.fixture
def swing_series():
    return list(SWING_GAME_SERIES)


@pytest.fixture
def close_facts():
    """A 33-26 regular-season game."""
    return GameFacts(home_team="Chiefs", away_team="Bills", home_score=33, away_score=26)


@pytest.fixture
def blowout_facts():
    """A 35-7 regular-season game."""
    return GameFacts(home_team="Eagles", away_team="Giants", home_score=35, away_score=7)
