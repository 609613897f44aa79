from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .data_pattern import DataPattern
from .mapping import TargetField


class ConfirmedMapping(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_column: str
    target_table: str | None = None
    target_column: str | None = None
    skipped: bool = False

    @property
    def target(self) -> TargetField | None:
        if self.skipped or self.target_table is None or self.target_column is None:
            return None
        return TargetField(table=self.target_table, column=self.target_column)

    @classmethod
    def skip(cls, source_column: str) -> ConfirmedMapping:
        return cls(source_column=source_column, skipped=True)

    @model_validator(mode="after")
    def _target_required_unless_skipped(self) -> ConfirmedMapping:
        if self.skipped:
            return self
        if not self.target_table or not self.target_column:
            raise ValueError(
                f"{self.source_column}: a confirmed mapping needs a target table and column"
            )
        if TargetField(table=self.target_table, column=self.target_column).is_unmapped:
            raise ValueError(
                f"{self.source_column}: confirm a real target or mark the column skipped"
            )
        return self


class ReviewDecision(StrEnum):
    ACCEPTED = "accepted"
    SUBSTITUTED = "substituted"
    SKIPPED = "skipped"


class MappingOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_column: str
    normalized_name: str
    primary_pattern: DataPattern
    suggested: TargetField
    suggested_confidence: float = Field(ge=0.0, le=1.0)
    final: TargetField | None = None
    decision: ReviewDecision

    @property
    def learnable(self) -> bool:
        return self.decision is not ReviewDecision.SKIPPED and self.final is not None


class MappingCorrection(BaseModel):
    """A substitution: negative on ``rejected``, positive on ``chosen``."""

    model_config = ConfigDict(frozen=True)

    normalized_name: str
    pattern: DataPattern
    rejected: TargetField
    chosen: TargetField
