"""Domain services.

Profiling, pattern detection, fingerprinting, suggestion and feedback logic
operating on domain entities.
"""

from .dna import SourceDNAExtractor
from .feedback import FeedbackLoop, corrections_for, learned_affinities
from .mapping import MappingSuggester, ScoringWeights, estimate_accuracy
from .naming import normalize_column_name
from .patterns import PatternDetector, validate_npi
from .profiling import ColumnProfiler
from .similarity import HistoryIndex, rank_records

__all__ = [
    # Profiling and detection
    "ColumnProfiler",
    "PatternDetector",
    "normalize_column_name",
    "validate_npi",
    # Fingerprinting
    "SourceDNAExtractor",
    # History
    "HistoryIndex",
    "rank_records",
    # Suggestion
    "MappingSuggester",
    "ScoringWeights",
    "estimate_accuracy",
    # Feedback
    "FeedbackLoop",
    "corrections_for",
    "learned_affinities",
]
