"""History corpus adapters.

Both indexes only ever append. ``InMemorySimilarityIndex`` swaps an immutable
tuple under a lock, so a reader sees either the old snapshot or the new one.
``JsonlSimilarityIndex`` persists one record per line and fsyncs each append.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import os
from pathlib import Path
import threading

from pydantic import ValidationError

from ...domain.entities.history import HistoricalMigrationRecord, SimilarMigration
from ...domain.exceptions import CorpusUnavailableError
from ...domain.services.similarity.ranking import rank_records


class InMemorySimilarityIndex:
    """Append-only corpus held in memory, for tests and single-process runs."""

    def __init__(self, records: Iterable[HistoricalMigrationRecord] = ()) -> None:
        super().__init__()
        self._lock = threading.Lock()
        self._records: tuple[HistoricalMigrationRecord, ...] = tuple(records)

    def add(self, record: HistoricalMigrationRecord) -> None:
        with self._lock:
            self._records = (*self._records, record)

    def query(self, vector: Sequence[float], k: int) -> list[SimilarMigration]:
        return rank_records(self._records, vector, k)

    def records(self) -> tuple[HistoricalMigrationRecord, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)


class JsonlSimilarityIndex:
    """Append-only corpus stored as JSON lines.

    The file is read on first use and cached; a missing file is an empty
    corpus. A torn last line left by an interrupted append is dropped; any
    other read, parse, or write failure raises ``CorpusUnavailableError`` so
    callers can degrade instead of crashing.

    Example:
        >>> index = JsonlSimilarityIndex(Path("corpus.jsonl"))
        >>> index.add(record)
        >>> index.query(source_dna.signature_vector, 5)
    """

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self.path = Path(path)
        self._lock = threading.Lock()
        self._records: tuple[HistoricalMigrationRecord, ...] | None = None
        self._torn_offset: int | None = None
        self._needs_newline = False

    def add(self, record: HistoricalMigrationRecord) -> None:
        with self._lock:
            current = self._load()
            line = record.model_dump_json() + "\n"
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                if self._torn_offset is not None:
                    os.truncate(self.path, self._torn_offset)
                with self.path.open("a", encoding="utf-8") as handle:
                    if self._needs_newline:
                        handle.write("\n")
                    handle.write(line)
                    handle.flush()
                    os.fsync(handle.fileno())
            except OSError as exc:
                raise CorpusUnavailableError(
                    f"Cannot append to migration corpus {self.path}: {exc}"
                ) from exc
            self._torn_offset = None
            self._needs_newline = False
            self._records = (*current, record)

    def query(self, vector: Sequence[float], k: int) -> list[SimilarMigration]:
        return rank_records(self.records(), vector, k)

    def records(self) -> tuple[HistoricalMigrationRecord, ...]:
        with self._lock:
            return self._load()

    def __len__(self) -> int:
        return len(self.records())

    def _load(self) -> tuple[HistoricalMigrationRecord, ...]:
        """Read the corpus once.

        An unterminated last line that does not parse is an append that never
        finished: it is skipped here and cut off before the next append.
        Corrupt complete lines are a hard error.
        """
        if self._records is not None:
            return self._records
        if not self.path.exists():
            self._records = ()
            return self._records
        try:
            data = self.path.read_bytes()
        except OSError as exc:
            raise CorpusUnavailableError(
                f"Cannot read migration corpus {self.path}: {exc}"
            ) from exc

        *lines, tail = data.split(b"\n")
        loaded = [
            self._parse(line, number)
            for number, line in enumerate(lines, start=1)
            if line.strip()
        ]
        if tail.strip():
            try:
                loaded.append(self._parse(tail, len(lines) + 1))
            except CorpusUnavailableError:
                self._torn_offset = len(data) - len(tail)
            else:
                self._needs_newline = True
        self._records = tuple(loaded)
        return self._records

    def _parse(self, line: bytes, number: int) -> HistoricalMigrationRecord:
        try:
            return HistoricalMigrationRecord.model_validate_json(line.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise CorpusUnavailableError(
                f"Cannot read migration corpus {self.path}: line {number} is not UTF-8"
            ) from exc
        except ValidationError as exc:
            raise CorpusUnavailableError(
                f"Migration corpus {self.path} is corrupt at line {number}: "
                f"{exc.error_count()} error(s)"
            ) from exc
