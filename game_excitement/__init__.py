"""
Game Excitement: spoiler-free excitement ranking for finished sporting events.

This package provides:
- Ingestion of loosely shaped win-probability series and game records
- Bounded local smoothing of probability samples
- Independent feature extractors over the cleaned series
- Adaptive weighting and a bounded Game Excitement Index (GEI) score
- A score-only fallback model when the series is missing or too short
- Spoiler-free narratives, key factors and data-quality checks
- Parallel batch scoring and ranking of many games
"""

__version__ = "0.1.0"
