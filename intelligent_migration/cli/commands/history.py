from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from ...domain.exceptions import CorpusUnavailableError
from ...infrastructure.container import DependencyContainer
from ..helpers import load_runtime_config, require_corpus
from ..presenters.history import HistoryPresenter

console = Console()


@click.command()
@click.option(
    "--corpus",
    "corpus_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Migration corpus (JSON lines) to list",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to an intelligent_migration.toml config file",
)
def history_command(corpus_path: Path | None, config_file: Path | None) -> None:
    """List the confirmed migrations recorded in the corpus."""
    config = load_runtime_config(config_file, corpus_path=corpus_path)
    require_corpus(config)
    index = DependencyContainer(config=config, console=console).create_similarity_index()
    try:
        records = index.records()
    except CorpusUnavailableError as exc:
        raise click.ClickException(str(exc)) from exc
    HistoryPresenter(console).present(records)
