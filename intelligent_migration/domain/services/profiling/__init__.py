"""Column profiling services."""

from .column_profiler import (
    ALL_NULL_WARNING,
    DEFAULT_SAMPLE_SEED,
    DEFAULT_SAMPLE_SIZE,
    ColumnProfiler,
    infer_data_type,
    is_null,
    sample_column,
)

__all__ = [
    "ALL_NULL_WARNING",
    "DEFAULT_SAMPLE_SEED",
    "DEFAULT_SAMPLE_SIZE",
    "ColumnProfiler",
    "infer_data_type",
    "is_null",
    "sample_column",
]
