"""Column profiling.

This module derives the statistical side of a column fingerprint: null and
uniqueness rates, mean length and a best-effort primitive type, computed over
a bounded, seeded sample so cost does not grow with the source size.
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING

import pandas as pd

from ...entities.column_dna import ColumnProfile
from ...entities.data_pattern import DataType

if TYPE_CHECKING:
    from collections.abc import Sequence

DEFAULT_SAMPLE_SIZE = 100
DEFAULT_SAMPLE_SEED = 42

ALL_NULL_WARNING = "all sampled values are null"

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(\d+\.\d*|\.\d+|\d+)([eE][+-]?\d+)?$")
_BOOLEAN_TOKENS = frozenset({"true", "false", "yes", "no", "y", "n", "t", "f"})
_DATE_RES = (
    re.compile(r"^\d{4}-\d{2}-\d{2}([T ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?([+-]\d{2}:?\d{2}|Z)?)?$"),
    re.compile(r"^\d{1,2}[/-]\d{1,2}[/-]\d{2,4}$"),
    re.compile(
        r"^(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?\s+\d{1,2},?\s+\d{4}$",
        re.IGNORECASE,
    ),
)


def is_null(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if value is pd.NA or value is pd.NaT:
        return True
    if isinstance(value, (str, bytes)):
        return not value.strip()
    return False


def as_text(value: object) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace").strip()
    return str(value).strip()


def sample_column(
    values: Sequence[object],
    size: int = DEFAULT_SAMPLE_SIZE,
    seed: int = DEFAULT_SAMPLE_SEED,
) -> list[object]:
    """Return at most ``size`` values, chosen deterministically for ``seed``.

    Sampled values keep their source order.
    """
    series = pd.Series(list(values), dtype=object)
    if len(series) > size:
        series = series.sample(n=size, random_state=seed).sort_index()
    return series.tolist()


def infer_data_type(texts: Sequence[str]) -> DataType:
    if not texts:
        return DataType.UNKNOWN
    if all(_INTEGER_RE.match(text) for text in texts):
        return DataType.INTEGER
    if all(_FLOAT_RE.match(text) for text in texts):
        return DataType.FLOAT
    if all(text.lower() in _BOOLEAN_TOKENS for text in texts):
        return DataType.BOOLEAN
    if all(any(regex.match(text) for regex in _DATE_RES) for text in texts):
        return DataType.DATE
    return DataType.STRING


class ColumnProfiler:
    """Computes statistics for one column's sample values.

    Example:
        >>> profiler = ColumnProfiler(sample_size=50, seed=7)
        >>> profile = profiler.profile(["John", None, "Jane"])
        >>> profile.null_percentage
        0.3333
    """

    def __init__(
        self,
        *,
        sample_size: int = DEFAULT_SAMPLE_SIZE,
        seed: int = DEFAULT_SAMPLE_SEED,
    ) -> None:
        super().__init__()
        if sample_size < 1:
            raise ValueError(f"sample_size must be positive, got {sample_size}")
        self.sample_size = sample_size
        self.seed = seed

    def profile(self, values: Sequence[object]) -> ColumnProfile:
        """Profile a column.

        Args:
            values: Raw column values in source order, nulls included

        Returns:
            ColumnProfile for the sampled values; degenerate columns yield
            conservative defaults and a warning instead of an error
        """
        sample = sample_column(values, self.sample_size, self.seed)
        raw_non_null = tuple(value for value in sample if not is_null(value))
        texts = tuple(as_text(value) for value in raw_non_null)

        if not texts:
            return ColumnProfile(
                values=(),
                raw_values=(),
                sample_size=len(sample),
                null_percentage=1.0,
                unique_percentage=0.0,
                avg_length=0.0,
                data_type=DataType.UNKNOWN,
                warnings=(ALL_NULL_WARNING,),
            )

        return ColumnProfile(
            values=texts,
            raw_values=raw_non_null,
            sample_size=len(sample),
            null_percentage=_ratio(len(sample) - len(texts), len(sample)),
            unique_percentage=_ratio(len(set(texts)), len(texts)),
            avg_length=round(sum(len(text) for text in texts) / len(texts), 4),
            data_type=infer_data_type(texts),
        )


def _ratio(numerator: int, denominator: int) -> float:
    return round(numerator / denominator, 4) if denominator else 0.0
