from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .feedback import ConfirmedMapping, MappingCorrection, MappingOutcome, ReviewDecision


class HistoricalMigrationRecord(BaseModel):
    """Append-only outcome of one confirmed review session."""

    model_config = ConfigDict(frozen=True)

    record_id: str
    dna_id: str
    source_system: str | None = None
    source_type: str
    structure_hash: str
    signature_vector: tuple[float, ...]
    timestamp: datetime
    confirmed_mappings: tuple[ConfirmedMapping, ...] = ()
    outcomes: tuple[MappingOutcome, ...] = ()

    @property
    def learnable_outcomes(self) -> tuple[MappingOutcome, ...]:
        return tuple(outcome for outcome in self.outcomes if outcome.learnable)

    @property
    def corrections(self) -> tuple[MappingCorrection, ...]:
        corrections: list[MappingCorrection] = []
        for outcome in self.outcomes:
            if outcome.decision is not ReviewDecision.SUBSTITUTED:
                continue
            if outcome.final is None or outcome.suggested.is_unmapped:
                continue
            corrections.append(
                MappingCorrection(
                    normalized_name=outcome.normalized_name,
                    pattern=outcome.primary_pattern,
                    rejected=outcome.suggested,
                    chosen=outcome.final,
                )
            )
        return tuple(corrections)

    def import_plan(self) -> dict[str, str]:
        return {
            outcome.source_column: outcome.final.identity
            for outcome in self.learnable_outcomes
            if outcome.final is not None
        }


class SimilarMigration(BaseModel):
    model_config = ConfigDict(frozen=True)

    record: HistoricalMigrationRecord
    similarity: float = Field(ge=0.0, le=1.0)

    @property
    def dna_id(self) -> str:
        return self.record.dna_id

    @property
    def source_system(self) -> str | None:
        return self.record.source_system
