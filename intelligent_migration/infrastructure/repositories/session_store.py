from __future__ import annotations

import json
from pathlib import Path
import threading

from pydantic import BaseModel, ConfigDict, ValidationError

from ...domain.entities.history import SimilarMigration
from ...domain.entities.mapping import MappingSuggestion
from ...domain.entities.session import MigrationSession, SessionState
from ...domain.entities.source_dna import SourceDNA
from ..io.exceptions import DataParseError, DataSourceNotFoundError


class InMemorySessionStore:
    """Open review sessions keyed by ``dna_id``."""

    def __init__(self) -> None:
        super().__init__()
        self._lock = threading.Lock()
        self._sessions: dict[str, MigrationSession] = {}

    def save(self, session: MigrationSession) -> None:
        with self._lock:
            self._sessions[session.dna_id] = session

    def get(self, dna_id: str) -> MigrationSession | None:
        with self._lock:
            return self._sessions.get(dna_id)

    def discard(self, dna_id: str) -> None:
        with self._lock:
            self._sessions.pop(dna_id, None)

    def __len__(self) -> int:
        return len(self._sessions)


class SessionSnapshot(BaseModel):
    """A review session written to disk between ``analyze`` and ``confirm``."""

    model_config = ConfigDict(frozen=True)

    state: SessionState
    source_dna: SourceDNA
    suggestions: tuple[MappingSuggestion, ...] = ()
    similar_migrations: tuple[SimilarMigration, ...] = ()

    @classmethod
    def from_session(cls, session: MigrationSession) -> SessionSnapshot:
        return cls(
            state=session.state,
            source_dna=session.source_dna,
            suggestions=tuple(session.suggestions),
            similar_migrations=tuple(session.similar_migrations),
        )

    def to_session(self) -> MigrationSession:
        return MigrationSession(
            source_dna=self.source_dna,
            state=self.state,
            suggestions=list(self.suggestions),
            similar_migrations=list(self.similar_migrations),
        )


def write_session(path: str | Path, session: MigrationSession) -> None:
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    payload = SessionSnapshot.from_session(session).model_dump(mode="json")
    with file_path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2)


def read_session(path: str | Path) -> MigrationSession:
    file_path = Path(path)
    if not file_path.exists():
        raise DataSourceNotFoundError(f"Session file not found: {file_path}")
    try:
        snapshot = SessionSnapshot.model_validate_json(
            file_path.read_text(encoding="utf-8")
        )
    except ValidationError as exc:
        raise DataParseError(f"Invalid session file {file_path}: {exc}") from exc
    return snapshot.to_session()
