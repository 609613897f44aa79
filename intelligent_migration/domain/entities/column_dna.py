from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .data_pattern import DataPattern, DataType, EvidenceKind

MAX_DISPLAY_SAMPLES = 5


class PatternScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    pattern: DataPattern
    confidence: float = Field(ge=0.0, le=1.0)
    evidence: EvidenceKind


@dataclass(frozen=True, slots=True)
class ColumnProfile:
    """Statistics of one column's bounded sample."""

    values: tuple[str, ...]
    raw_values: tuple[object, ...]
    sample_size: int
    null_percentage: float
    unique_percentage: float
    avg_length: float
    data_type: DataType
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def non_null_count(self) -> int:
        return len(self.values)


class ColumnDNA(BaseModel):
    model_config = ConfigDict(frozen=True)

    original_name: str
    normalized_name: str
    pattern_scores: tuple[PatternScore, ...] = ()
    primary_pattern: DataPattern = DataPattern.UNKNOWN
    pattern_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    sample_values: tuple[str, ...] = Field(default=(), max_length=MAX_DISPLAY_SAMPLES)
    null_percentage: float = Field(default=0.0, ge=0.0, le=1.0)
    unique_percentage: float = Field(default=0.0, ge=0.0, le=1.0)
    avg_length: float = Field(default=0.0, ge=0.0)
    data_type_inferred: DataType = DataType.UNKNOWN
    warnings: tuple[str, ...] = ()

    @property
    def detected_patterns(self) -> tuple[DataPattern, ...]:
        return tuple(score.pattern for score in self.pattern_scores)

    def confidence_for(self, pattern: DataPattern) -> float:
        for score in self.pattern_scores:
            if score.pattern is pattern:
                return score.confidence
        return 0.0

    @model_validator(mode="after")
    def _primary_is_detected(self) -> ColumnDNA:
        detected = self.detected_patterns
        if detected and self.primary_pattern is not detected[0]:
            raise ValueError(
                f"primary_pattern {self.primary_pattern} must be the top detected "
                f"pattern {detected[0]}"
            )
        if not detected and self.primary_pattern is not DataPattern.UNKNOWN:
            raise ValueError(
                "primary_pattern must be UNKNOWN when no patterns are detected"
            )
        return self
