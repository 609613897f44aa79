"""Review feedback and history learning."""

from .feedback_loop import (
    AffinityKey,
    FeedbackLoop,
    affinity_for,
    corrections_for,
    learned_affinities,
)

__all__ = [
    "AffinityKey",
    "FeedbackLoop",
    "affinity_for",
    "corrections_for",
    "learned_affinities",
]
