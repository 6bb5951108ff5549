"""Result type produced by the excitement engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from game_excitement.utils.constants import get_tier


# External (camelCase) names for breakdown keys
EXTERNAL_KEYS = {
    "dramatic_finish": "dramaticFinish",
    "lead_changes": "leadChanges",
    "total_score": "totalScore",
}


@dataclass
class ScoreResult:
    """Excitement score for one game."""

    score: float  # [0.5, 9.8]
    confidence: float  # [0, 1]
    breakdown: dict[str, float]
    narrative: str
    key_factors: list[str]
    key_moments: list[str] = field(default_factory=list)
    is_fallback: bool = False

    @property
    def tier(self) -> str:
        return get_tier(self.score)

    def summary(self) -> str:
        """Human-readable, spoiler-free summary."""
        source = "score-based fallback" if self.is_fallback else "win probability"
        return (
            f"Excitement: {self.score:.1f}/10 ({self.tier})\n"
            f"  {self.narrative}\n"
            f"  Key factors: {', '.join(self.key_factors)}\n"
            f"  Confidence: {self.confidence:.0%} ({source})"
        )

    def to_dict(self) -> dict[str, Any]:
        """External representation with camelCase keys."""
        return {
            "score": self.score,
            "confidence": self.confidence,
            "breakdown": {EXTERNAL_KEYS.get(k, k): v for k, v in self.breakdown.items()},
            "narrative": self.narrative,
            "keyFactors": list(self.key_factors),
            "keyMoments": list(self.key_moments),
            "tier": self.tier,
            "fallback": self.is_fallback,
        }
