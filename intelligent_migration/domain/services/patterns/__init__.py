"""Semantic pattern detection.

This package provides the matcher registry for every ``DataPattern`` and the
detector that ranks candidate patterns for a profiled column.
"""

from .detector import DEFAULT_PATTERN_FLOOR, PatternDetection, PatternDetector, coerce_sample
from .library import (
    PATTERN_LIBRARY,
    PatternMatcher,
    ValueShape,
    ensure_complete,
    get_matcher,
)
from .npi import validate_npi

__all__ = [
    "DEFAULT_PATTERN_FLOOR",
    "PATTERN_LIBRARY",
    "PatternDetection",
    "PatternDetector",
    "PatternMatcher",
    "ValueShape",
    "coerce_sample",
    "ensure_complete",
    "get_matcher",
    "validate_npi",
]
