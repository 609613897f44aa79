"""Mapping services for target field suggestion.

This package scores source columns against the target schema using pattern
affinity, name similarity and the history of similar migrations.
"""

from .similarity import NameMatch, field_name_match, name_similarity
from .suggester import (
    DEFAULT_CONFIDENCE_FLOOR,
    DEFAULT_MAX_ALTERNATIVES,
    DEFAULT_TOP_K,
    DEGRADED_REASON,
    CandidateScore,
    HistoryContext,
    MappingSuggester,
    ScoringWeights,
    SuggestionRun,
    combine_signals,
)
from .transforms import Transform, determine_transform, estimate_accuracy

__all__ = [
    "DEFAULT_CONFIDENCE_FLOOR",
    "DEFAULT_MAX_ALTERNATIVES",
    "DEFAULT_TOP_K",
    "DEGRADED_REASON",
    "CandidateScore",
    "HistoryContext",
    "MappingSuggester",
    "NameMatch",
    "ScoringWeights",
    "SuggestionRun",
    "Transform",
    "combine_signals",
    "determine_transform",
    "estimate_accuracy",
    "field_name_match",
    "name_similarity",
]
