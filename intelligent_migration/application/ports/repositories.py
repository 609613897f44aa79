from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from ...domain.entities.history import HistoricalMigrationRecord, SimilarMigration
    from ...domain.entities.session import MigrationSession
    from ...domain.entities.source_dna import SourceData
    from ...domain.entities.target_schema import TargetSchema


@runtime_checkable
class SimilarityIndexPort(Protocol):
    pass

    def add(self, record: HistoricalMigrationRecord) -> None: ...

    def query(self, vector: Sequence[float], k: int) -> list[SimilarMigration]: ...

    def records(self) -> tuple[HistoricalMigrationRecord, ...]: ...

    def __len__(self) -> int: ...


@runtime_checkable
class TargetSchemaRepositoryPort(Protocol):
    pass

    def load(self) -> TargetSchema: ...


@runtime_checkable
class SourceDataRepositoryPort(Protocol):
    pass

    def read_source(
        self,
        file_path: str | Path,
        *,
        source_type: str = "CSV",
        source_system: str | None = None,
    ) -> SourceData: ...


@runtime_checkable
class SessionStorePort(Protocol):
    pass

    def save(self, session: MigrationSession) -> None: ...

    def get(self, dna_id: str) -> MigrationSession | None: ...

    def discard(self, dna_id: str) -> None: ...
