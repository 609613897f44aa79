"""Nearest-neighbour ranking over SourceDNA signature vectors."""

from .index import HistoryIndex
from .ranking import cosine_similarity, rank_records

__all__ = ["HistoryIndex", "cosine_similarity", "rank_records"]
