from __future__ import annotations

from collections.abc import Iterator, Mapping

from pydantic import BaseModel, ConfigDict, Field

from .data_pattern import DataPattern
from .mapping import TargetField

AFFINITY_DECAY = 0.2
MIN_AFFINITY = 0.2


class TargetSchema(BaseModel):
    """Static pattern-to-field affinity table.

    ``tables`` maps table -> column -> acceptable patterns, best first.
    ``synonyms`` maps a column name to alternative source spellings and
    applies to every table carrying that column.
    """

    model_config = ConfigDict(frozen=True)

    tables: Mapping[str, Mapping[str, tuple[DataPattern, ...]]]
    synonyms: Mapping[str, tuple[str, ...]] = Field(default_factory=dict)

    def fields(self) -> Iterator[TargetField]:
        for table in sorted(self.tables):
            for column in sorted(self.tables[table]):
                yield TargetField(table=table, column=column)

    def has_field(self, target: TargetField) -> bool:
        return target.column in self.tables.get(target.table, {})

    def affinity(self, pattern: DataPattern, target: TargetField) -> float:
        accepted = self.tables.get(target.table, {}).get(target.column, ())
        if pattern not in accepted:
            return 0.0
        position = accepted.index(pattern)
        return max(1.0 - AFFINITY_DECAY * position, MIN_AFFINITY)

    def synonyms_for(self, column: str) -> tuple[str, ...]:
        return tuple(self.synonyms.get(column, ()))

    @property
    def field_count(self) -> int:
        return sum(len(columns) for columns in self.tables.values())
