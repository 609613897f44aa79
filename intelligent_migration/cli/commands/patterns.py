import click
from rich.console import Console
from rich.table import Table

from ...domain.entities.data_pattern import DataPattern
from ...domain.services.patterns.library import get_matcher

console = Console()

MAX_LISTED_SYNONYMS = 4


@click.command()
def list_patterns_command() -> None:
    table = Table(title="Recognized Data Patterns")
    table.add_column("Pattern", style="cyan")
    table.add_column("Value Shapes", justify="right")
    table.add_column("Checksum", justify="center")
    table.add_column("Column Names")
    for pattern in DataPattern.recognized():
        matcher = get_matcher(pattern)
        names = ", ".join(matcher.synonyms[:MAX_LISTED_SYNONYMS])
        if len(matcher.synonyms) > MAX_LISTED_SYNONYMS:
            names += ", ..."
        table.add_row(
            pattern.value,
            str(len(matcher.shapes)),
            "✓" if matcher.validator is not None else "",
            names,
        )
    console.print(table)
