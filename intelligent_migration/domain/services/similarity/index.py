from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ...entities.history import HistoricalMigrationRecord, SimilarMigration


@runtime_checkable
class HistoryIndex(Protocol):
    """What the suggester and feedback loop need from the migration corpus.

    Implementations may raise ``CorpusUnavailableError`` from any method when
    the backing store cannot be read or written.
    """

    def add(self, record: HistoricalMigrationRecord) -> None: ...

    def query(self, vector: Sequence[float], k: int) -> list[SimilarMigration]: ...

    def records(self) -> tuple[HistoricalMigrationRecord, ...]: ...
