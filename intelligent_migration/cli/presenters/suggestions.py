from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table

if TYPE_CHECKING:
    from rich.console import Console

    from ...application.models import AnalyzeSourceResponse
    from ...domain.entities.mapping import MappingSuggestion

HIGH_CONFIDENCE = 0.8
LOW_CONFIDENCE = 0.5


def _confidence_style(confidence: float) -> str:
    if confidence >= HIGH_CONFIDENCE:
        return "green"
    if confidence >= LOW_CONFIDENCE:
        return "yellow"
    return "red"


class SuggestionPresenter:
    """Renders the review payload of an analysis run."""

    def __init__(self, console: Console) -> None:
        super().__init__()
        self.console = console

    def present(self, response: AnalyzeSourceResponse) -> None:
        self.console.print()
        self.console.print(self._build_suggestion_table(response.suggestions))
        if response.similar_past_migrations:
            self.console.print()
            self.console.print(self._build_similar_table(response))
        self.console.print()
        self._print_summary(response)

    def _build_suggestion_table(
        self, suggestions: list[MappingSuggestion]
    ) -> Table:
        table = Table(
            title="Mapping Suggestions",
            show_header=True,
            header_style="bold cyan",
            border_style="bright_blue",
            title_style="bold magenta",
        )
        table.add_column("Source Column", style="cyan", no_wrap=True)
        table.add_column("Target", style="white", no_wrap=True)
        table.add_column("Confidence", justify="right", no_wrap=True)
        table.add_column("Transform", style="dim", no_wrap=True)
        table.add_column("Alternatives", style="dim", overflow="fold", ratio=2)
        table.add_column("Reasons", overflow="fold", ratio=3)
        for suggestion in suggestions:
            style = _confidence_style(suggestion.confidence)
            target = (
                "[dim]unmapped[/dim]"
                if suggestion.is_unmapped
                else suggestion.target.identity
            )
            alternatives = ", ".join(
                f"{alt.target.identity} ({alt.confidence:.0%})"
                for alt in suggestion.alternative_mappings
            )
            table.add_row(
                suggestion.source_column,
                target,
                f"[{style}]{suggestion.confidence:.0%}[/{style}]",
                suggestion.transform_required or "",
                alternatives,
                "\n".join(suggestion.reasons),
            )
        return table

    def _build_similar_table(self, response: AnalyzeSourceResponse) -> Table:
        table = Table(
            title="Similar Past Migrations",
            show_header=True,
            header_style="bold cyan",
            border_style="bright_blue",
        )
        table.add_column("DNA", style="cyan", no_wrap=True)
        table.add_column("Source System", no_wrap=True)
        table.add_column("Similarity", justify="right", style="yellow")
        for match in response.similar_past_migrations:
            table.add_row(
                match.dna_id, match.source_system or "-", f"{match.similarity:.2f}"
            )
        return table

    def _print_summary(self, response: AnalyzeSourceResponse) -> None:
        mapped = sum(1 for s in response.suggestions if not s.is_unmapped)
        self.console.print(
            f"[bold]Session:[/bold] {response.dna_id}  "
            f"[bold]Mapped:[/bold] {mapped}/{len(response.suggestions)}  "
            f"[bold]Estimated accuracy:[/bold] {response.estimated_accuracy:.0%}"
        )
        if not response.corpus_available:
            self.console.print(
                "[yellow]⚠[/yellow] Migration corpus unavailable; "
                "history was not consulted"
            )
        for warning in response.warnings:
            self.console.print(f"[dim]  - {warning}[/dim]")
