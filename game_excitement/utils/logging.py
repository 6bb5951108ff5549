"""Logging setup and console formatting for the CLI."""

from __future__ import annotations

import logging

SECTION_WIDTH = 70
SCORE_BAR_WIDTH = 20


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """
    Configure root logging for CLI runs.

    Engine modules log through ``logging.getLogger(__name__)``; by default
    only warnings (skipped samples, failed calculations) reach the console.
    ``debug`` takes precedence over ``verbose``.
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def print_section(title: str) -> None:
    """Print ``title`` between two rules of ``=``."""
    print("=" * SECTION_WIDTH)
    print(title)
    print("=" * SECTION_WIDTH)


def print_success(message: str) -> None:
    print(f"✓ {message}")


def print_error(message: str) -> None:
    print(f"✗ {message}")


def print_warning(message: str) -> None:
    print(f"⚠️  {message}")


def print_info(message: str) -> None:
    print(f"ℹ  {message}")


def format_score_bar(score: float, maximum: float = 10.0) -> str:
    """Render a score as a fixed-width bar, e.g. ``[##########----------]``."""
    filled = int(round(SCORE_BAR_WIDTH * max(0.0, min(score, maximum)) / maximum))
    return "[" + "#" * filled + "-" * (SCORE_BAR_WIDTH - filled) + "]"
