"""Application layer for the intelligent migration engine.

This layer contains the analysis and review use cases and defines ports
(interfaces) for logging, storage and source readers.
"""

from .models import (
    AnalyzeSourceRequest,
    AnalyzeSourceResponse,
    ConfirmSessionRequest,
    ConfirmSessionResponse,
    SimilarMigrationSummary,
)

__all__ = [
    "AnalyzeSourceRequest",
    "AnalyzeSourceResponse",
    "ConfirmSessionRequest",
    "ConfirmSessionResponse",
    "SimilarMigrationSummary",
]
