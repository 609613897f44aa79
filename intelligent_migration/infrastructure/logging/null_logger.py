from __future__ import annotations

from typing import TYPE_CHECKING

from typing_extensions import override

from ...application.ports.services import LoggerPort

if TYPE_CHECKING:
    from ...domain.entities.history import HistoricalMigrationRecord
    from ...domain.entities.mapping import MappingSuggestion
    from ...domain.entities.source_dna import SourceDNA


class NullLogger(LoggerPort):
    pass

    @override
    def info(self, message: str) -> None:
        return

    @override
    def success(self, message: str) -> None:
        return

    @override
    def warning(self, message: str) -> None:
        return

    @override
    def error(self, message: str) -> None:
        return

    @override
    def debug(self, message: str) -> None:
        return

    @override
    def verbose(self, message: str) -> None:
        return

    @override
    def log_analysis_start(
        self, source_name: str, *, row_count: int, column_count: int
    ) -> None:
        return

    @override
    def log_source_dna(self, source_dna: SourceDNA) -> None:
        return

    @override
    def log_suggestions(
        self, suggestions: tuple[MappingSuggestion, ...], estimated_accuracy: float
    ) -> None:
        return

    @override
    def log_feedback_recorded(self, record: HistoricalMigrationRecord) -> None:
        return

    @override
    def log_final_stats(self) -> None:
        return
