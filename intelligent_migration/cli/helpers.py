"""Shared option handling for CLI commands."""

from __future__ import annotations

from dataclasses import replace
import json
from pathlib import Path

import click
from pydantic import TypeAdapter, ValidationError

from ..config import ConfigLoader, MigrationEngineConfig
from ..domain.entities.feedback import ConfirmedMapping
from ..domain.entities.session import MigrationSession

_DECISIONS = TypeAdapter(list[ConfirmedMapping])


def load_runtime_config(
    config_file: Path | None,
    *,
    corpus_path: Path | None = None,
    schema_path: Path | None = None,
) -> MigrationEngineConfig:
    """Config file and environment, overridden by explicit CLI paths."""
    config = ConfigLoader.load(config_file=config_file)
    if corpus_path is not None:
        config = replace(config, corpus_path=corpus_path)
    if schema_path is not None:
        config = replace(config, schema_path=schema_path)
    return config


def require_corpus(config: MigrationEngineConfig) -> Path:
    if config.corpus_path is None:
        raise click.UsageError(
            "A migration corpus is required: pass --corpus or set [paths] corpus"
        )
    return config.corpus_path


def read_decisions(path: Path) -> list[ConfirmedMapping]:
    """Reviewer decisions: a JSON list, or an object with a ``confirmed`` list."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Invalid JSON in {path}: {exc}") from exc
    if isinstance(payload, dict):
        payload = payload.get("confirmed", [])
    try:
        return _DECISIONS.validate_python(payload)
    except ValidationError as exc:
        raise click.ClickException(f"Invalid decisions in {path}: {exc}") from exc


def accept_suggested(session: MigrationSession) -> list[ConfirmedMapping]:
    """Confirm every suggestion as proposed; unmapped columns are skipped."""
    confirmed: list[ConfirmedMapping] = []
    for suggestion in session.suggestions:
        if suggestion.is_unmapped:
            confirmed.append(ConfirmedMapping.skip(suggestion.source_column))
            continue
        confirmed.append(
            ConfirmedMapping(
                source_column=suggestion.source_column,
                target_table=suggestion.target_table,
                target_column=suggestion.target_column,
            )
        )
    return confirmed
