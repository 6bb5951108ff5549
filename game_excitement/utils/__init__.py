"""Shared utilities for the game-excitement project."""

from .logging import (
    setup_logging,
    print_section,
    print_success,
    print_error,
    print_warning,
    print_info,
    format_score_bar,
)
from .constants import (
    MIN_SAMPLES,
    SCORE_FLOOR,
    SCORE_CEILING,
    TIERS,
    get_tier,
)

__all__ = [
    "setup_logging",
    "print_section",
    "print_success",
    "print_error",
    "print_warning",
    "print_info",
    "format_score_bar",
    "MIN_SAMPLES",
    "SCORE_FLOOR",
    "SCORE_CEILING",
    "TIERS",
    "get_tier",
]
