"""Port interfaces for external dependencies.

This module defines the protocols that infrastructure adapters implement:
console logging, the migration history corpus, the target schema store,
source readers and the review session store.
"""

from .repositories import (
    SessionStorePort,
    SimilarityIndexPort,
    SourceDataRepositoryPort,
    TargetSchemaRepositoryPort,
)
from .services import LoggerPort

__all__ = [
    "LoggerPort",
    "SessionStorePort",
    "SimilarityIndexPort",
    "SourceDataRepositoryPort",
    "TargetSchemaRepositoryPort",
]
