from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

UNMAPPED_NAME = "UNMAPPED"
NO_MATCH_REASON = "No match found"


class TargetField(BaseModel):
    model_config = ConfigDict(frozen=True)

    table: str
    column: str

    @property
    def identity(self) -> str:
        return f"{self.table}.{self.column}"

    @property
    def is_unmapped(self) -> bool:
        return self.table == UNMAPPED_NAME and self.column == UNMAPPED_NAME


UNMAPPED = TargetField(table=UNMAPPED_NAME, column=UNMAPPED_NAME)


class AlternativeMapping(BaseModel):
    model_config = ConfigDict(frozen=True)

    target_table: str
    target_column: str
    confidence: float = Field(gt=0.0, le=1.0)

    @property
    def target(self) -> TargetField:
        return TargetField(table=self.target_table, column=self.target_column)


class MappingSuggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_column: str
    target_table: str
    target_column: str
    confidence: float = Field(ge=0.0, le=1.0)
    reasons: tuple[str, ...] = ()
    alternative_mappings: tuple[AlternativeMapping, ...] = ()
    transform_required: str | None = None

    @property
    def target(self) -> TargetField:
        return TargetField(table=self.target_table, column=self.target_column)

    @property
    def is_unmapped(self) -> bool:
        return self.target.is_unmapped

    @classmethod
    def unmapped(cls, source_column: str) -> MappingSuggestion:
        return cls(
            source_column=source_column,
            target_table=UNMAPPED_NAME,
            target_column=UNMAPPED_NAME,
            confidence=0.0,
            reasons=(NO_MATCH_REASON,),
        )

    @model_validator(mode="after")
    def _alternatives_are_ranked(self) -> MappingSuggestion:
        previous = self.confidence
        seen = {self.target.identity}
        for alternative in self.alternative_mappings:
            identity = alternative.target.identity
            if identity in seen:
                raise ValueError(f"duplicate target in alternatives: {identity}")
            if alternative.confidence >= self.confidence:
                raise ValueError(
                    f"alternative {identity} must be less confident than the primary"
                )
            if alternative.confidence > previous:
                raise ValueError("alternative confidences must be non-increasing")
            seen.add(identity)
            previous = alternative.confidence
        return self
