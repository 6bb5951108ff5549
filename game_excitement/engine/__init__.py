"""
Excitement scoring engine for finished games.
"""

from game_excitement.engine.config import ScoringConfig
from game_excitement.engine.data import (
    RawSample,
    ProbabilitySample,
    QualityMetrics,
    GameFacts,
    parse_sample,
    parse_samples,
    parse_game_facts,
)
from game_excitement.engine.context import (
    GameContext,
    ContextualFactors,
    build_game_context,
    calculate_contextual_factors,
)
from game_excitement.engine.preprocessing import (
    normalize_win_probability,
    smooth_probabilities,
    preprocess_samples,
    has_sufficient_data,
)
from game_excitement.engine.features import (
    FeatureSet,
    NarrativeFlow,
    LeadChangeSummary,
    extract_features,
)
from game_excitement.engine.weighting import calculate_adaptive_weights
from game_excitement.engine.result import ScoreResult
from game_excitement.engine.scoring import (
    combine_scores,
    calculate_confidence,
    compute_excitement,
    score_game,
)
from game_excitement.engine.fallback import contextual_fallback
from game_excitement.engine.narrative import (
    spoiler_free_description,
    identify_key_factors,
    key_moments_from_breakdown,
)
from game_excitement.engine.data_quality import (
    DataQualityIssue,
    DataQualityReport,
    detect_data_quality_issues,
    format_data_quality_warning,
)
from game_excitement.engine.cache import ProbabilityCache, TTLPolicy, NoExpiry
from game_excitement.engine.rankings import GameRecord, score_games, rank_games

__all__ = [
    "ScoringConfig",
    "RawSample",
    "ProbabilitySample",
    "QualityMetrics",
    "GameFacts",
    "parse_sample",
    "parse_samples",
    "parse_game_facts",
    "GameContext",
    "ContextualFactors",
    "build_game_context",
    "calculate_contextual_factors",
    "normalize_win_probability",
    "smooth_probabilities",
    "preprocess_samples",
    "has_sufficient_data",
    "FeatureSet",
    "NarrativeFlow",
    "LeadChangeSummary",
    "extract_features",
    "calculate_adaptive_weights",
    "ScoreResult",
    "combine_scores",
    "calculate_confidence",
    "compute_excitement",
    "score_game",
    "contextual_fallback",
    "spoiler_free_description",
    "identify_key_factors",
    "key_moments_from_breakdown",
    "DataQualityIssue",
    "DataQualityReport",
    "detect_data_quality_issues",
    "format_data_quality_warning",
    "ProbabilityCache",
    "TTLPolicy",
    "NoExpiry",
    "GameRecord",
    "score_games",
    "rank_games",
]
