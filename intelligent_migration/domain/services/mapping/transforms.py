from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum

from ...entities.column_dna import ColumnDNA
from ...entities.data_pattern import DataPattern
from ...entities.history import SimilarMigration
from ...entities.mapping import MappingSuggestion, TargetField
from ...entities.target_schema import TargetSchema

ACCURACY_CAP = 0.99
SIMILARITY_BONUS_WEIGHT = 0.1


class Transform(StrEnum):
    NORMALIZE_PHONE = "NORMALIZE_PHONE"
    CONVERT_DATE_TO_ISO = "CONVERT_DATE_TO_ISO"
    PARSE_NAME_FIRST = "PARSE_NAME_FIRST"
    PARSE_NAME_LAST = "PARSE_NAME_LAST"
    CONVERT_STATE_TO_CODE = "CONVERT_STATE_TO_CODE"


def determine_transform(
    column: ColumnDNA, target: TargetField, schema: TargetSchema
) -> Transform | None:
    """Hint the value conversion the import needs for ``column`` into ``target``."""
    if target.is_unmapped:
        return None

    def accepts(pattern: DataPattern) -> bool:
        return schema.affinity(pattern, target) > 0.0

    primary = column.primary_pattern
    if primary is DataPattern.PHONE and accepts(DataPattern.PHONE):
        return Transform.NORMALIZE_PHONE
    if primary is DataPattern.DATE and accepts(DataPattern.DATE_ISO):
        return Transform.CONVERT_DATE_TO_ISO
    if primary is DataPattern.NAME_FULL:
        if accepts(DataPattern.NAME_FIRST):
            return Transform.PARSE_NAME_FIRST
        if accepts(DataPattern.NAME_LAST):
            return Transform.PARSE_NAME_LAST
    if accepts(DataPattern.STATE_CODE) and column.avg_length > 2:
        return Transform.CONVERT_STATE_TO_CODE
    return None


def estimate_accuracy(
    suggestions: Sequence[MappingSuggestion],
    similar_migrations: Sequence[SimilarMigration] = (),
) -> float:
    """Expected share of suggestions a reviewer will accept.

    Mean suggestion confidence plus a bonus for the closest past migration,
    capped below certainty.
    """
    if not suggestions:
        return 0.0
    mean = sum(s.confidence for s in suggestions) / len(suggestions)
    best = max((m.similarity for m in similar_migrations), default=0.0)
    return round(min(mean + SIMILARITY_BONUS_WEIGHT * best, ACCURACY_CAP), 4)
