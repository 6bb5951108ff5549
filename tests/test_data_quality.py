"""
Tests for probability series data quality checks.
"""

import pytest

from game_excitement.engine.data import GameFacts
from game_excitement.engine.data_quality import (
    DataQualityReport,
    count_crossings,
    detect_data_quality_issues,
    format_data_quality_warning,
)


def issue_types(report):
    return [issue.type for issue in report.issues]


@pytest.fixture
def settled_series():
    """A long series that swings once and settles at 99."""
    return [40.0] * 100 + [60.0] * 99 + [99.0]


class TestCountCrossings:
    """Test 50% crossing counts."""

    def test_crossings(self):
        """Only sign changes around 50 count."""
        assert count_crossings([40, 60, 55, 45, 50, 52]) == 2
        assert count_crossings([60]) == 0


class TestDetectIssues:
    """Test issue detection."""

    def test_insufficient_data_stops(self, make_samples):
        """Short series report only insufficient data."""
        report = detect_data_quality_issues(make_samples([50] * 5))
        assert issue_types(report) == ["insufficient-data"]
        assert report.severity == "high"
        assert detect_data_quality_issues(None).severity == "high"

    def test_clean_series(self, make_samples, settled_series):
        """A dense settled series with a lead change has no issues."""
        facts = GameFacts(home_team="A", away_team="B", home_score=24, away_score=14)
        report = detect_data_quality_issues(make_samples(settled_series), facts)
        assert not report.has_issues
        assert report.severity == "none"
        assert report.summary() == ""

    def test_trailing_noise(self, make_samples):
        """An unsettled final probability is flagged."""
        report = detect_data_quality_issues(make_samples([60.0] * 200))
        assert issue_types(report) == ["trailing-noise"]

    def test_missing_drama(self, make_samples):
        """A close game with no crossings is flagged high."""
        facts = GameFacts(home_team="A", away_team="B", home_score=20, away_score=17)
        report = detect_data_quality_issues(make_samples([70.0] * 199 + [99.0]), facts)
        assert "missing-drama" in issue_types(report)
        assert report.severity == "high"

    def test_dense_feed_threshold(self, make_samples):
        """Dense-feed sports use a wider close-game margin and sample floor."""
        facts = GameFacts(home_team="A", away_team="B", home_score=100, away_score=91)
        series = [70.0] * 179 + [99.0]

        nfl = detect_data_quality_issues(make_samples(series), facts, sport="NFL")
        nba = detect_data_quality_issues(make_samples(series), facts, sport="nba")

        assert issue_types(nfl) == []
        assert issue_types(nba) == ["missing-drama", "sparse-data"]

    def test_one_possession_single_crossing(self, make_samples, settled_series):
        """A one-possession game with one lead change is flagged medium."""
        facts = GameFacts(home_team="A", away_team="B", home_score=24, away_score=21)
        report = detect_data_quality_issues(make_samples(settled_series), facts)
        assert issue_types(report) == ["low-drama-for-margin"]
        assert report.severity == "medium"

    def test_overtime_without_late_crossings(self, make_samples, settled_series):
        """Overtime games need late crossings."""
        facts = GameFacts(home_team="A", away_team="B", home_score=30, away_score=20, overtime=True)
        report = detect_data_quality_issues(make_samples(settled_series), facts)
        assert issue_types(report) == ["ot-no-crossings"]

    def test_sparse(self, make_samples):
        """Short but usable series are flagged low."""
        report = detect_data_quality_issues(make_samples([40.0] * 20 + [99.0]))
        assert issue_types(report) == ["sparse-data"]
        assert report.severity == "low"


class TestFormatting:
    """Test warning formatting."""

    def test_join(self, make_samples):
        """Messages are joined with semicolons."""
        report = detect_data_quality_issues(make_samples([60.0] * 20))
        warning = format_data_quality_warning(report)
        assert warning.count("; ") == 1
        assert warning.startswith("Final win probability is 60%")

    def test_empty(self):
        """No report or no issues formats to an empty string."""
        assert format_data_quality_warning(None) == ""
        assert format_data_quality_warning(DataQualityReport()) == ""
