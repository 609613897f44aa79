"""Domain entities.

Fingerprints (ColumnDNA, SourceDNA), the DataPattern vocabulary, mapping
suggestions, the target schema and the review/history records.
"""

from .column_dna import ColumnDNA, ColumnProfile, PatternScore
from .data_pattern import DataPattern, DataType, EvidenceKind
from .feedback import ConfirmedMapping, MappingCorrection, MappingOutcome, ReviewDecision
from .history import HistoricalMigrationRecord, SimilarMigration
from .mapping import (
    NO_MATCH_REASON,
    UNMAPPED,
    AlternativeMapping,
    MappingSuggestion,
    TargetField,
)
from .session import MigrationSession, SessionState
from .source_dna import SourceData, SourceDNA
from .target_schema import TargetSchema

__all__ = [
    "NO_MATCH_REASON",
    "UNMAPPED",
    "AlternativeMapping",
    "ColumnDNA",
    "ColumnProfile",
    "ConfirmedMapping",
    "DataPattern",
    "DataType",
    "EvidenceKind",
    "HistoricalMigrationRecord",
    "MappingCorrection",
    "MappingOutcome",
    "MappingSuggestion",
    "MigrationSession",
    "PatternScore",
    "ReviewDecision",
    "SessionState",
    "SimilarMigration",
    "SourceData",
    "SourceDNA",
    "TargetField",
    "TargetSchema",
]
