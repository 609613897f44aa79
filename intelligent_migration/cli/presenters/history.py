from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table

from ...domain.entities.feedback import ReviewDecision

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rich.console import Console

    from ...domain.entities.history import HistoricalMigrationRecord


class HistoryPresenter:
    pass

    def __init__(self, console: Console) -> None:
        super().__init__()
        self.console = console

    def present(self, records: Sequence[HistoricalMigrationRecord]) -> None:
        if not records:
            self.console.print("[dim]Migration corpus is empty[/dim]")
            return
        table = Table(
            title="Migration History",
            show_header=True,
            header_style="bold cyan",
            border_style="bright_blue",
            title_style="bold magenta",
        )
        table.add_column("Recorded", style="dim", no_wrap=True)
        table.add_column("DNA", style="cyan", no_wrap=True)
        table.add_column("Source", no_wrap=True)
        table.add_column("Columns", justify="right", style="yellow")
        table.add_column("Accepted", justify="right", style="green")
        table.add_column("Substituted", justify="right", style="yellow")
        table.add_column("Skipped", justify="right", style="dim")
        ordered = sorted(records, key=lambda record: record.timestamp, reverse=True)
        for record in ordered:
            counts = {decision: 0 for decision in ReviewDecision}
            for outcome in record.outcomes:
                counts[outcome.decision] += 1
            source = record.source_system or record.source_type
            table.add_row(
                record.timestamp.strftime("%Y-%m-%d %H:%M"),
                record.dna_id,
                source,
                str(len(record.outcomes)),
                str(counts[ReviewDecision.ACCEPTED]),
                str(counts[ReviewDecision.SUBSTITUTED]),
                str(counts[ReviewDecision.SKIPPED]),
            )
        self.console.print(table)
        self.console.print(f"[bold]Records:[/bold] {len(records)}")
