from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...domain.entities.history import HistoricalMigrationRecord
    from ...domain.entities.mapping import MappingSuggestion
    from ...domain.entities.source_dna import SourceDNA


@runtime_checkable
class LoggerPort(Protocol):
    pass

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def debug(self, message: str) -> None: ...

    def verbose(self, message: str) -> None: ...

    def log_analysis_start(
        self, source_name: str, *, row_count: int, column_count: int
    ) -> None: ...

    def log_source_dna(self, source_dna: SourceDNA) -> None: ...

    def log_suggestions(
        self, suggestions: tuple[MappingSuggestion, ...], estimated_accuracy: float
    ) -> None: ...

    def log_feedback_recorded(self, record: HistoricalMigrationRecord) -> None: ...

    def log_final_stats(self) -> None: ...
