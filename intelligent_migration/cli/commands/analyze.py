"""Analyze command - profile a source file and suggest target mappings.

A thin adapter over ``AnalyzeSourceUseCase``: it builds the request, runs the
use case and renders the review payload. ``--session-out`` keeps the open
review session on disk for a later ``confirm`` or ``abandon``.
"""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console

from ...application.models import AnalyzeSourceRequest
from ...infrastructure.container import DependencyContainer
from ...infrastructure.repositories.session_store import write_session
from ..helpers import load_runtime_config
from ..presenters.suggestions import SuggestionPresenter

console = Console()


@click.command()
@click.argument(
    "source", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option("--source-system", help="Source system name (default: detected)")
@click.option(
    "--source-type",
    default="CSV",
    show_default=True,
    help="Source type recorded on the Source DNA",
)
@click.option(
    "--corpus",
    "corpus_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Migration corpus (JSON lines) consulted for similar migrations",
)
@click.option(
    "--schema",
    "schema_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Target schema JSON (default: built-in healthcare schema)",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to an intelligent_migration.toml config file",
)
@click.option(
    "--session-out",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the open review session to this file",
)
@click.option("--json", "as_json", is_flag=True, help="Print the review payload as JSON")
@click.option(
    "-v", "--verbose", count=True, help="Increase verbosity level (e.g., -v, -vv)"
)
def analyze_command(
    source: Path,
    source_system: str | None,
    source_type: str,
    corpus_path: Path | None,
    schema_path: Path | None,
    config_file: Path | None,
    session_out: Path | None,
    as_json: bool,
    verbose: int,
) -> None:
    """Profile SOURCE and suggest a target field for every column.

    Examples:

    \b
        intelligent-migration analyze staff.csv
        intelligent-migration analyze staff.csv --corpus corpus.jsonl \\
            --session-out staff.session.json
    """
    config = load_runtime_config(
        config_file, corpus_path=corpus_path, schema_path=schema_path
    )
    container = DependencyContainer(
        config=config, verbose=verbose, console=console, use_null_logger=as_json
    )
    use_case = container.create_analysis_use_case()
    response = use_case.execute(
        AnalyzeSourceRequest(
            source_path=source,
            source_type=source_type,
            source_system=source_system,
            verbose=verbose,
        )
    )
    if not response.success:
        raise click.ClickException(response.error or "Analysis failed")

    if session_out is not None and response.dna_id is not None:
        session = container.create_session_store().get(response.dna_id)
        if session is not None:
            write_session(session_out, session)

    if as_json:
        click.echo(json.dumps(response.to_dict(), indent=2))
        return

    SuggestionPresenter(console).present(response)
    if session_out is not None:
        console.print(f"[dim]Review session written to {session_out}[/dim]")
    container.create_logger().log_final_stats()
