"""Structural hash and signature vector of a source.

The hash identifies sources with the same ordered column name/type
signature. The vector places structurally similar sources close together
under cosine similarity; its layout is fixed by ``SIGNATURE_LAYOUT``.
"""

from __future__ import annotations

import hashlib
import math
from collections.abc import Sequence

from ...entities.column_dna import ColumnDNA
from ...entities.data_pattern import DataPattern, DataType

SIGNATURE_PRECISION = 6
LENGTH_SCALE = 100.0
COLUMN_COUNT_SCALE = 500

_PATTERN_SLOTS = tuple(DataPattern)
_TYPE_SLOTS = tuple(DataType)
_STAT_SLOTS = ("mean_null", "mean_unique", "mean_length", "column_count")

SIGNATURE_LAYOUT: tuple[str, ...] = (
    *(f"pattern:{pattern.value}" for pattern in _PATTERN_SLOTS),
    *(f"type:{data_type.value}" for data_type in _TYPE_SLOTS),
    *_STAT_SLOTS,
)
SIGNATURE_LENGTH = len(SIGNATURE_LAYOUT)


def structure_hash(columns: Sequence[ColumnDNA]) -> str:
    signature = "|".join(
        f"{column.normalized_name}:{column.data_type_inferred.value}"
        for column in columns
    )
    return hashlib.sha256(signature.encode("utf-8")).hexdigest()


def signature_vector(columns: Sequence[ColumnDNA]) -> tuple[float, ...]:
    """Build the fixed-length embedding of a source.

    Args:
        columns: Column fingerprints in source order

    Returns:
        Tuple of ``SIGNATURE_LENGTH`` floats: a confidence-weighted share of
        primary patterns, the share of inferred types, mean null and unique
        rates, scaled mean length and a log-scaled column count
    """
    vector = [0.0] * SIGNATURE_LENGTH
    if not columns:
        return tuple(vector)

    count = len(columns)
    type_offset = len(_PATTERN_SLOTS)
    stats_offset = type_offset + len(_TYPE_SLOTS)
    for column in columns:
        weight = column.pattern_confidence
        if column.primary_pattern is DataPattern.UNKNOWN:
            weight = 1.0
        vector[_PATTERN_SLOTS.index(column.primary_pattern)] += weight / count
        vector[type_offset + _TYPE_SLOTS.index(column.data_type_inferred)] += 1.0 / count

    vector[stats_offset] = sum(c.null_percentage for c in columns) / count
    vector[stats_offset + 1] = sum(c.unique_percentage for c in columns) / count
    mean_length = sum(c.avg_length for c in columns) / count
    vector[stats_offset + 2] = min(mean_length / LENGTH_SCALE, 1.0)
    vector[stats_offset + 3] = min(
        math.log1p(count) / math.log1p(COLUMN_COUNT_SCALE), 1.0
    )
    return tuple(round(value, SIGNATURE_PRECISION) for value in vector)
