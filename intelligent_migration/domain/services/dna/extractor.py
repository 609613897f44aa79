"""SourceDNA extraction.

Each column is profiled and classified on its own in a thread pool; the
extractor waits for every column before assembling the fingerprint, and a
failure in one column degrades only that column.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from uuid import uuid4

from ...entities.column_dna import MAX_DISPLAY_SAMPLES, ColumnDNA
from ...entities.source_dna import SourceData, SourceDNA
from ...exceptions import EmptySourceError
from ..naming import normalize_column_name
from ..patterns.detector import PatternDetector
from ..profiling.column_profiler import ColumnProfiler
from .signature import signature_vector, structure_hash
from .source_system import detect_source_system

DEFAULT_MAX_WORKERS = 4

EMPTY_SOURCE_WARNING = "source has no rows"
SINGLE_ROW_WARNING = "source has a single row; statistics are not representative"


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _new_dna_id() -> str:
    return uuid4().hex


class SourceDNAExtractor:
    """Builds the SourceDNA fingerprint of one import.

    Example:
        >>> extractor = SourceDNAExtractor()
        >>> source = SourceData(
        ...     source_system=None,
        ...     source_type="CSV",
        ...     rows=[{"first_name": "John", "email": "j@x.org"}],
        ... )
        >>> dna = extractor.extract(source)
        >>> [column.primary_pattern for column in dna.columns]
        [<DataPattern.NAME_FIRST: 'NAME_FIRST'>, <DataPattern.EMAIL: 'EMAIL'>]
    """

    def __init__(
        self,
        profiler: ColumnProfiler | None = None,
        detector: PatternDetector | None = None,
        *,
        max_workers: int = DEFAULT_MAX_WORKERS,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_dna_id,
    ) -> None:
        super().__init__()
        self.profiler = profiler or ColumnProfiler()
        self.detector = detector or PatternDetector()
        self.max_workers = max(1, max_workers)
        self._clock = clock
        self._id_factory = id_factory

    def extract(self, source: SourceData) -> SourceDNA:
        """Fingerprint a source.

        Raises:
            EmptySourceError: The source has no columns at all
        """
        names = source.columns()
        if not names:
            raise EmptySourceError(
                f"Source '{source.source_type}' has no columns to profile"
            )

        column_values = [source.column_values(name) for name in names]
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(names))) as pool:
            columns = tuple(pool.map(self._extract_isolated, names, column_values))

        warnings: list[str] = []
        row_count = len(source.rows)
        if row_count == 0:
            warnings.append(EMPTY_SOURCE_WARNING)
        elif row_count == 1:
            warnings.append(SINGLE_ROW_WARNING)
        for column in columns:
            warnings.extend(f"{column.original_name}: {w}" for w in column.warnings)

        return SourceDNA(
            dna_id=self._id_factory(),
            source_type=source.source_type,
            source_system=source.source_system or detect_source_system(names),
            column_count=len(columns),
            row_count=row_count,
            columns=columns,
            structure_hash=structure_hash(columns),
            signature_vector=signature_vector(columns),
            detected_at=self._clock(),
            warnings=tuple(warnings),
        )

    def extract_column(self, name: str, values: Sequence[object]) -> ColumnDNA:
        profile = self.profiler.profile(values)
        detection = self.detector.detect(name, profile)
        return ColumnDNA(
            original_name=name,
            normalized_name=normalize_column_name(name),
            pattern_scores=detection.scores,
            primary_pattern=detection.primary_pattern,
            pattern_confidence=detection.confidence,
            sample_values=profile.values[:MAX_DISPLAY_SAMPLES],
            null_percentage=profile.null_percentage,
            unique_percentage=profile.unique_percentage,
            avg_length=profile.avg_length,
            data_type_inferred=profile.data_type,
            warnings=profile.warnings + detection.warnings,
        )

    def _extract_isolated(self, name: str, values: Sequence[object]) -> ColumnDNA:
        try:
            return self.extract_column(name, values)
        except Exception as exc:
            return ColumnDNA(
                original_name=name,
                normalized_name=normalize_column_name(name),
                null_percentage=1.0,
                warnings=(f"profiling failed: {exc}",),
            )
