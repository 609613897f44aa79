from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..domain.entities.feedback import ReviewDecision

if TYPE_CHECKING:
    from pathlib import Path

    from ..domain.entities.feedback import ConfirmedMapping
    from ..domain.entities.history import HistoricalMigrationRecord, SimilarMigration
    from ..domain.entities.mapping import MappingSuggestion
    from ..domain.entities.source_dna import SourceDNA


def _empty_str_list() -> list[str]:
    return []


def _empty_suggestions() -> list[MappingSuggestion]:
    return []


def _empty_similar() -> list[SimilarMigrationSummary]:
    return []


@dataclass(slots=True)
class AnalyzeSourceRequest:
    source_path: Path
    source_type: str = "CSV"
    source_system: str | None = None
    verbose: int = 0


@dataclass(frozen=True, slots=True)
class SimilarMigrationSummary:
    dna_id: str
    similarity: float
    source_system: str | None

    @classmethod
    def from_match(cls, match: SimilarMigration) -> SimilarMigrationSummary:
        return cls(
            dna_id=match.dna_id,
            similarity=match.similarity,
            source_system=match.source_system,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "dna_id": self.dna_id,
            "similarity": self.similarity,
            "source_system": self.source_system,
        }


@dataclass(slots=True)
class AnalyzeSourceResponse:
    """Review payload handed to whoever confirms the suggestions."""

    success: bool = True
    source_dna: SourceDNA | None = None
    suggestions: list[MappingSuggestion] = field(default_factory=_empty_suggestions)
    estimated_accuracy: float = 0.0
    similar_past_migrations: list[SimilarMigrationSummary] = field(
        default_factory=_empty_similar
    )
    corpus_available: bool = True
    warnings: list[str] = field(default_factory=_empty_str_list)
    error: str | None = None

    @property
    def dna_id(self) -> str | None:
        return self.source_dna.dna_id if self.source_dna else None

    def to_dict(self) -> dict[str, object]:
        return {
            "source_dna": (
                self.source_dna.model_dump(mode="json") if self.source_dna else None
            ),
            "suggestions": [s.model_dump(mode="json") for s in self.suggestions],
            "estimated_accuracy": self.estimated_accuracy,
            "similar_past_migrations": [
                m.to_dict() for m in self.similar_past_migrations
            ],
            "warnings": list(self.warnings),
        }


@dataclass(slots=True)
class ConfirmSessionRequest:
    dna_id: str
    confirmed: list[ConfirmedMapping]


@dataclass(slots=True)
class ConfirmSessionResponse:
    dna_id: str
    record: HistoricalMigrationRecord

    @property
    def accepted(self) -> int:
        return self._count(ReviewDecision.ACCEPTED)

    @property
    def substituted(self) -> int:
        return self._count(ReviewDecision.SUBSTITUTED)

    @property
    def skipped(self) -> int:
        return self._count(ReviewDecision.SKIPPED)

    def _count(self, decision: ReviewDecision) -> int:
        return sum(1 for o in self.record.outcomes if o.decision is decision)
