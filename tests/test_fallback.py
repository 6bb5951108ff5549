"""
Tests for the score-only fallback model.
"""

import pytest

from game_excitement.engine.config import ScoringConfig
from game_excitement.engine.context import build_game_context
from game_excitement.engine.data import GameFacts
from game_excitement.engine.fallback import (
    contextual_fallback,
    fallback_base_score,
    fallback_confidence,
    fallback_description,
)


def facts(home, away, **kwargs):
    return GameFacts(home_team="Home", away_team="Away", home_score=home, away_score=away, **kwargs)


class TestFallbackBaseScore:
    """Test the margin-band base score."""

    @pytest.mark.parametrize("home,away,expected", [
        (20, 17, 8.0),
        (20, 14, 6.5),
        (24, 10, 4.5),
        (31, 3, 2.0),
    ])
    def test_margin_bands(self, home, away, expected):
        """Base score steps down with the margin."""
        assert fallback_base_score(facts(home, away), None) == expected

    def test_bonuses(self):
        """High scoring, overtime and postseason bonuses add up."""
        game = facts(30, 27, overtime=True, season_type=3)
        assert fallback_base_score(game, build_game_context(game)) == 8.0 + 1.0 + 1.5 + 0.5


class TestFallbackConfidence:
    """Test fallback confidence bounds."""

    def test_neutral(self):
        """Neutral multipliers give 0.55."""
        assert fallback_confidence(1.0, 1.0) == pytest.approx(0.55)

    def test_bounds(self):
        """Confidence stays within [0.4, 0.85]."""
        assert fallback_confidence(0.0, 0.0) == 0.4
        assert fallback_confidence(3.0, 3.0) == 0.85


class TestFallbackDescription:
    """Test fallback descriptions."""

    def test_close_overtime_shootout(self):
        """Phrases reflect scoring, margin, overtime and stakes."""
        game = facts(31, 28, overtime=True)
        assert fallback_description(game, ["Playoff stakes"]) == (
            "High-scoring, Close finish, Overtime, Playoff stakes"
        )

    def test_default(self):
        """Middling games get a neutral description."""
        assert fallback_description(facts(24, 14), []) == "Competitive matchup"


class TestContextualFallback:
    """Test the complete fallback result."""

    def test_result_shape(self):
        """The fallback result is flagged and carries a score-based breakdown."""
        game = facts(24, 21)
        result = contextual_fallback(game, build_game_context(game))

        assert result.is_fallback
        assert result.score == 8.0
        assert result.confidence == pytest.approx(0.55)
        assert result.breakdown == {
            "base": 8.0,
            "margin": 3.0,
            "total_score": 45.0,
            "overtime": 0.0,
            "stakes": 1.0,
            "quality": 1.0,
            "expectation": 1.0,
        }
        assert result.key_factors == ["Final margin", "Total scoring", "Regulation finish"]
        assert result.key_moments[0] == "Analysis based on final margin"

    def test_capped_at_ceiling(self):
        """Stacked bonuses and multipliers never exceed 9.8."""
        game = facts(38, 35, overtime=True, labels=("Championship",), expectation="upset")
        result = contextual_fallback(game, build_game_context(game))
        assert result.score == 9.8

    def test_floor(self):
        """Heavily discounted blowouts never drop below 0.5."""
        game = facts(10, 45, expectation="chalk")
        result = contextual_fallback(game, build_game_context(game))
        assert result.score >= 0.5

    def test_deterministic_without_context(self):
        """Fallback is deterministic and tolerates a missing context."""
        game = facts(17, 10)
        assert contextual_fallback(game, None) == contextual_fallback(game, None)
        assert contextual_fallback(game, None).score == 6.5

    def test_config_ceiling(self):
        """The output ceiling comes from the config."""
        game = facts(20, 17, overtime=True)
        config = ScoringConfig(score_ceiling=9.0)
        assert contextual_fallback(game, None, config).score == 9.0

    def test_to_dict_marks_fallback(self):
        """External output flags the fallback and renames totalScore."""
        output = contextual_fallback(facts(20, 17), None).to_dict()
        assert output["fallback"] is True
        assert output["breakdown"]["totalScore"] == 37.0
