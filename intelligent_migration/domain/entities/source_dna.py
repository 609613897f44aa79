from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

from .column_dna import ColumnDNA


@dataclass(frozen=True, slots=True)
class SourceData:
    """One import as handed over by the ingestion side."""

    source_system: str | None
    source_type: str
    rows: Sequence[Mapping[str, Any]] = field(default_factory=tuple)
    declared_columns: tuple[str, ...] = ()

    def columns(self) -> list[str]:
        seen: dict[str, None] = dict.fromkeys(self.declared_columns)
        for row in self.rows:
            for key in row:
                seen.setdefault(str(key), None)
        return list(seen)

    def column_values(self, column: str) -> list[Any]:
        return [row.get(column) for row in self.rows]

    @classmethod
    def from_frame(
        cls, frame: pd.DataFrame, *, source_type: str, source_system: str | None
    ) -> SourceData:
        cleaned = frame.astype(object).where(frame.notna(), None)
        return cls(
            source_system=source_system,
            source_type=source_type,
            rows=tuple(cleaned.to_dict(orient="records")),
            declared_columns=tuple(str(column) for column in frame.columns),
        )


class SourceDNA(BaseModel):
    model_config = ConfigDict(frozen=True)

    dna_id: str
    source_type: str
    source_system: str | None = None
    column_count: int = Field(ge=0)
    row_count: int = Field(ge=0)
    columns: tuple[ColumnDNA, ...]
    structure_hash: str
    signature_vector: tuple[float, ...]
    detected_at: datetime
    warnings: tuple[str, ...] = ()

    def column(self, original_name: str) -> ColumnDNA | None:
        for column in self.columns:
            if column.original_name == original_name:
                return column
        return None

    def fingerprint(self) -> str:
        return self.model_dump_json(exclude={"dna_id", "detected_at"})
