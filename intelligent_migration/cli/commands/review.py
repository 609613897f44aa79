"""Confirm and abandon commands - close a review session written by ``analyze``."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

import click
from rich.console import Console

from ...application.models import ConfirmSessionRequest
from ...domain.exceptions import MigrationEngineError
from ...infrastructure.container import DependencyContainer
from ...infrastructure.io.exceptions import MigrationInfrastructureError
from ...infrastructure.repositories.session_store import read_session, write_session
from ..helpers import (
    accept_suggested,
    load_runtime_config,
    read_decisions,
    require_corpus,
)

console = Console()

FC = TypeVar("FC", bound=Callable[..., object])


def _session_argument() -> Callable[[FC], FC]:
    return click.argument(
        "session_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
    )


def _config_option() -> Callable[[FC], FC]:
    return click.option(
        "--config",
        "config_file",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Path to an intelligent_migration.toml config file",
    )


@click.command()
@_session_argument()
@click.argument(
    "decisions_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--corpus",
    "corpus_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Migration corpus (JSON lines) that receives the new record",
)
@_config_option()
@click.option(
    "-v", "--verbose", count=True, help="Increase verbosity level (e.g., -v, -vv)"
)
def confirm_command(
    session_file: Path,
    decisions_file: Path | None,
    corpus_path: Path | None,
    config_file: Path | None,
    verbose: int,
) -> None:
    """Record the reviewed mappings of SESSION_FILE in the corpus.

    DECISIONS_FILE is a JSON list of ``{"source_column", "target_table",
    "target_column"}`` objects, or ``{"source_column", "skipped": true}``.
    Columns it does not mention are recorded as skipped. Without it every
    suggestion is accepted as proposed.
    """
    config = load_runtime_config(config_file, corpus_path=corpus_path)
    require_corpus(config)
    container = DependencyContainer(config=config, verbose=verbose, console=console)
    try:
        session = read_session(session_file)
    except MigrationInfrastructureError as exc:
        raise click.ClickException(str(exc)) from exc
    confirmed = (
        read_decisions(decisions_file)
        if decisions_file is not None
        else accept_suggested(session)
    )

    container.create_session_store().save(session)
    use_case = container.create_review_use_case()
    try:
        response = use_case.confirm(
            ConfirmSessionRequest(dna_id=session.dna_id, confirmed=confirmed)
        )
    except MigrationEngineError as exc:
        raise click.ClickException(str(exc)) from exc

    write_session(session_file, session)
    console.print(
        f"[bold]Accepted:[/bold] {response.accepted}  "
        f"[bold]Substituted:[/bold] {response.substituted}  "
        f"[bold]Skipped:[/bold] {response.skipped}"
    )


@click.command()
@_session_argument()
@_config_option()
def abandon_command(session_file: Path, config_file: Path | None) -> None:
    """Abandon SESSION_FILE without writing anything to the corpus."""
    config = load_runtime_config(config_file)
    container = DependencyContainer(config=config, console=console)
    try:
        session = read_session(session_file)
    except MigrationInfrastructureError as exc:
        raise click.ClickException(str(exc)) from exc
    container.create_session_store().save(session)
    try:
        container.create_review_use_case().abandon(session.dna_id)
    except MigrationEngineError as exc:
        raise click.ClickException(str(exc)) from exc
    write_session(session_file, session)
