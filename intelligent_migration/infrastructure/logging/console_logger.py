from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from typing_extensions import override

from ...application.ports.services import LoggerPort

if TYPE_CHECKING:
    from ...domain.entities.history import HistoricalMigrationRecord
    from ...domain.entities.mapping import MappingSuggestion
    from ...domain.entities.source_dna import SourceDNA


class LogLevel(IntEnum):
    NORMAL = 0
    VERBOSE = 1
    DEBUG = 2


@dataclass(slots=True)
class LogContext:
    source_name: str = ""
    dna_id: str = ""
    operation: str = ""
    start_time: datetime = field(default_factory=datetime.now)

    def elapsed_ms(self) -> float:
        return (datetime.now() - self.start_time).total_seconds() * 1000


def _empty_stats() -> dict[str, int]:
    return {
        "sources_analyzed": 0,
        "columns_profiled": 0,
        "suggestions_made": 0,
        "unmapped_columns": 0,
        "feedback_records": 0,
        "warnings": 0,
        "errors": 0,
    }


class ConsoleLogger(LoggerPort):
    pass

    def __init__(self, console: Console | None = None, verbosity: int = 0) -> None:
        super().__init__()
        self.console = console or Console()
        self.verbosity = verbosity
        self._context: LogContext | None = None
        self._stats: dict[str, int] = _empty_stats()

    def set_context(self, **kwargs: str) -> None:
        if self._context is None:
            self._context = LogContext()
        for key, value in kwargs.items():
            if hasattr(self._context, key):
                setattr(self._context, key, value)

    def clear_context(self) -> None:
        self._context = None

    @override
    def info(self, message: str, *, level: int = LogLevel.NORMAL) -> None:
        if self.verbosity >= level:
            prefix = self._get_prefix()
            self.console.print(f"{prefix}{message}")

    @override
    def verbose(self, message: str) -> None:
        if self.verbosity >= LogLevel.VERBOSE:
            prefix = self._get_prefix()
            self.console.print(f"[dim]{prefix}{message}[/dim]")

    @override
    def debug(self, message: str) -> None:
        if self.verbosity >= LogLevel.DEBUG:
            prefix = self._get_prefix()
            self.console.print(f"[dim cyan]{prefix}{message}[/dim cyan]")

    @override
    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    @override
    def warning(self, message: str) -> None:
        self._stats["warnings"] += 1
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    @override
    def error(self, message: str) -> None:
        self._stats["errors"] += 1
        self.console.print(f"[red]✗[/red] {message}")

    @override
    def log_analysis_start(
        self, source_name: str, *, row_count: int, column_count: int
    ) -> None:
        self.set_context(source_name=source_name, operation="analyze")
        self._stats["sources_analyzed"] += 1
        self.console.print()
        self.console.print(f"[bold]Analyzing {source_name}[/bold]")
        self.verbose(f"  {row_count:,} rows, {column_count} columns")

    @override
    def log_source_dna(self, source_dna: SourceDNA) -> None:
        self.set_context(dna_id=source_dna.dna_id)
        self._stats["columns_profiled"] += source_dna.column_count
        system = source_dna.source_system or "unknown system"
        self.verbose(f"  Source DNA {source_dna.dna_id} ({system})")
        self.debug(f"    Structure hash: {source_dna.structure_hash}")
        if self.verbosity >= LogLevel.DEBUG:
            for column in source_dna.columns:
                self.debug(
                    f"    {column.original_name}: {column.primary_pattern} "
                    f"({column.pattern_confidence:.0%}, {column.data_type_inferred})"
                )

    @override
    def log_suggestions(
        self, suggestions: tuple[MappingSuggestion, ...], estimated_accuracy: float
    ) -> None:
        unmapped = sum(1 for suggestion in suggestions if suggestion.is_unmapped)
        self._stats["suggestions_made"] += len(suggestions)
        self._stats["unmapped_columns"] += unmapped
        self.success(
            f"Suggested {len(suggestions) - unmapped} of {len(suggestions)} columns "
            f"(estimated accuracy {estimated_accuracy:.0%})"
        )
        if self._context is not None:
            self.debug(f"    Analysis took {self._context.elapsed_ms():.0f} ms")

    @override
    def log_feedback_recorded(self, record: HistoricalMigrationRecord) -> None:
        self._stats["feedback_records"] += 1
        learnable = len(record.learnable_outcomes)
        skipped = len(record.outcomes) - learnable
        self.success(
            f"Recorded review of {record.dna_id}: {learnable} confirmed, {skipped} skipped"
        )
        corrections = record.corrections
        if corrections:
            self.verbose(f"  {len(corrections)} correction(s) will inform future runs")

    @override
    def log_final_stats(self) -> None:
        if self.verbosity >= LogLevel.VERBOSE:
            self.console.print()
            self.console.print("[dim]Migration Statistics:[/dim]")
            self.console.print(
                f"[dim]  Sources analyzed: {self._stats['sources_analyzed']}[/dim]"
            )
            self.console.print(
                f"[dim]  Columns profiled: {self._stats['columns_profiled']}[/dim]"
            )
            self.console.print(
                f"[dim]  Suggestions: {self._stats['suggestions_made']} "
                f"({self._stats['unmapped_columns']} unmapped)[/dim]"
            )
            if self._stats["feedback_records"] > 0:
                self.console.print(
                    f"[dim]  Reviews recorded: {self._stats['feedback_records']}[/dim]"
                )
            if self._stats["warnings"] > 0:
                self.console.print(
                    f"[dim yellow]  Warnings: {self._stats['warnings']}[/dim yellow]"
                )
            if self._stats["errors"] > 0:
                self.console.print(
                    f"[dim red]  Errors: {self._stats['errors']}[/dim red]"
                )

    def get_stats(self) -> dict[str, int]:
        return self._stats.copy()

    def reset_stats(self) -> None:
        self._stats = _empty_stats()

    def _get_prefix(self) -> str:
        if self._context is None or self.verbosity < LogLevel.DEBUG:
            return ""
        parts: list[str] = []
        if self._context.source_name:
            parts.append(self._context.source_name)
        if self._context.operation:
            parts.append(self._context.operation)
        return escape(f"[{':'.join(parts)}] ") if parts else ""
