"""Mapping suggestion.

Each candidate target field gets three signals in [0, 1]:

1. pattern affinity: how strongly the column's primary pattern predicts the
   field, from the schema's affinity table or from reviews learned earlier;
2. name similarity: the source name against the field name and synonyms;
3. historical prior: what similar past migrations did with a column of the
   same name.

Signals are combined with a weighted noisy-OR, ``1 - prod(1 - w * s)``, which
stays in [0, 1] and never decreases when a signal increases.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from ...entities.column_dna import ColumnDNA
from ...entities.history import HistoricalMigrationRecord, SimilarMigration
from ...entities.mapping import AlternativeMapping, MappingSuggestion, TargetField
from ...entities.source_dna import SourceDNA
from ...entities.target_schema import TargetSchema
from ...exceptions import CorpusUnavailableError
from ..feedback.feedback_loop import AffinityKey, affinity_for, learned_affinities
from ..similarity.index import HistoryIndex
from .similarity import DEFAULT_NAME_THRESHOLD, NameMatch, field_name_match
from .transforms import determine_transform

DEFAULT_CONFIDENCE_FLOOR = 0.35
DEFAULT_TOP_K = 5
DEFAULT_MAX_ALTERNATIVES = 3
DEFAULT_HISTORY_MIN_SIMILARITY = 0.5
CONFIDENCE_PRECISION = 4

DEGRADED_REASON = "Historical prior unavailable: migration corpus could not be read"


@dataclass(frozen=True, slots=True)
class ScoringWeights:
    pattern: float = 0.6
    name: float = 0.85
    history: float = 0.9

    def __post_init__(self) -> None:
        for label, value in (
            ("pattern", self.pattern),
            ("name", self.name),
            ("history", self.history),
        ):
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{label} weight must be within [0, 1], got {value}")


def combine_signals(
    affinity: float, name: float, history: float, weights: ScoringWeights
) -> float:
    remainder = (
        (1.0 - weights.pattern * affinity)
        * (1.0 - weights.name * name)
        * (1.0 - weights.history * history)
    )
    return round(min(max(1.0 - remainder, 0.0), 1.0), CONFIDENCE_PRECISION)


@dataclass(frozen=True, slots=True)
class HistoryContext:
    """Corpus view loaded once per suggestion pass."""

    similar: tuple[SimilarMigration, ...] = ()
    learned: Mapping[AffinityKey, float] = field(default_factory=dict)
    corpus_available: bool = True


@dataclass(frozen=True, slots=True)
class CandidateScore:
    target: TargetField
    confidence: float
    affinity: float
    name: NameMatch
    history: float
    learned: bool = False

    @property
    def sort_key(self) -> tuple[float, float, float, str]:
        return (-self.confidence, -self.affinity, -self.name.score, self.target.identity)


@dataclass(frozen=True, slots=True)
class SuggestionRun:
    suggestions: tuple[MappingSuggestion, ...]
    similar_migrations: tuple[SimilarMigration, ...]
    corpus_available: bool


class MappingSuggester:
    """Ranks target fields for every column of a SourceDNA.

    The affinity table and the history index are injected, so independent
    suggesters can serve different target schemas side by side.

    Example:
        >>> suggester = MappingSuggester(schema, index, confidence_floor=0.4)
        >>> run = suggester.suggest(source_dna)
        >>> for suggestion in run.suggestions:
        ...     print(suggestion.source_column, suggestion.target.identity)
    """

    def __init__(
        self,
        schema: TargetSchema,
        index: HistoryIndex | None = None,
        *,
        weights: ScoringWeights | None = None,
        confidence_floor: float = DEFAULT_CONFIDENCE_FLOOR,
        top_k: int = DEFAULT_TOP_K,
        max_alternatives: int = DEFAULT_MAX_ALTERNATIVES,
        history_min_similarity: float = DEFAULT_HISTORY_MIN_SIMILARITY,
        name_similarity_threshold: float = DEFAULT_NAME_THRESHOLD,
    ) -> None:
        super().__init__()
        self.schema = schema
        self.index = index
        self.weights = weights or ScoringWeights()
        self.confidence_floor = confidence_floor
        self.top_k = top_k
        self.max_alternatives = max_alternatives
        self.history_min_similarity = history_min_similarity
        self.name_similarity_threshold = name_similarity_threshold

    def suggest(self, source_dna: SourceDNA) -> SuggestionRun:
        context = self.load_history(source_dna.signature_vector)
        suggestions = tuple(
            self.suggest_column(column, context) for column in source_dna.columns
        )
        return SuggestionRun(
            suggestions=suggestions,
            similar_migrations=context.similar,
            corpus_available=context.corpus_available,
        )

    def load_history(self, vector: Sequence[float]) -> HistoryContext:
        """Read the corpus once; an unreadable corpus degrades to no history."""
        if self.index is None:
            return HistoryContext()
        try:
            similar = self.index.query(vector, self.top_k)
            records: tuple[HistoricalMigrationRecord, ...] = self.index.records()
        except CorpusUnavailableError:
            return HistoryContext(corpus_available=False)
        return HistoryContext(
            similar=tuple(similar),
            learned=learned_affinities(records),
        )

    def suggest_column(
        self, column: ColumnDNA, context: HistoryContext | None = None
    ) -> MappingSuggestion:
        context = context or HistoryContext()
        ranked = self.score_candidates(column, context)
        if not ranked or ranked[0].confidence < self.confidence_floor:
            suggestion = MappingSuggestion.unmapped(column.original_name)
            if context.corpus_available:
                return suggestion
            return suggestion.model_copy(
                update={"reasons": suggestion.reasons + (DEGRADED_REASON,)}
            )

        best = ranked[0]
        alternatives = tuple(
            AlternativeMapping(
                target_table=candidate.target.table,
                target_column=candidate.target.column,
                confidence=candidate.confidence,
            )
            for candidate in ranked[1:]
            if 0.0 < candidate.confidence < best.confidence
        )[: self.max_alternatives]

        return MappingSuggestion(
            source_column=column.original_name,
            target_table=best.target.table,
            target_column=best.target.column,
            confidence=best.confidence,
            reasons=self._reasons(column, best, context),
            alternative_mappings=alternatives,
            transform_required=determine_transform(column, best.target, self.schema),
        )

    def score_candidates(
        self, column: ColumnDNA, context: HistoryContext
    ) -> list[CandidateScore]:
        priors = self.historical_priors(column.normalized_name, context.similar)
        candidates: list[CandidateScore] = []
        for target in self.schema.fields():
            static = self.schema.affinity(column.primary_pattern, target)
            static *= column.pattern_confidence
            learned = affinity_for(context.learned, column.primary_pattern, target.identity)
            affinity = max(static, learned)
            name = field_name_match(
                column.normalized_name,
                target.column,
                self.schema,
                threshold=self.name_similarity_threshold,
            )
            history = priors.get(target.identity, 0.0)
            candidates.append(
                CandidateScore(
                    target=target,
                    confidence=combine_signals(affinity, name.score, history, self.weights),
                    affinity=round(affinity, CONFIDENCE_PRECISION),
                    name=name,
                    history=history,
                    learned=learned > static,
                )
            )
        candidates.sort(key=lambda candidate: candidate.sort_key)
        return candidates

    def historical_priors(
        self, normalized_name: str, similar: Sequence[SimilarMigration]
    ) -> dict[str, float]:
        """Similarity-weighted votes for each target from similar migrations.

        Only records at or above ``history_min_similarity`` that resolved a
        column with the same normalized name vote. Each vote counts its
        record's similarity, and the total is averaged over the voting
        records, so one record at similarity 0.6 yields a prior of 0.6. A
        substitution votes against the target the reviewer rejected.
        """
        votes: dict[str, float] = defaultdict(float)
        voters = 0
        for match in similar:
            if match.similarity < self.history_min_similarity:
                continue
            voted = False
            for outcome in match.record.learnable_outcomes:
                if outcome.normalized_name != normalized_name or outcome.final is None:
                    continue
                votes[outcome.final.identity] += match.similarity
                voted = True
            for correction in match.record.corrections:
                if correction.normalized_name != normalized_name:
                    continue
                votes[correction.rejected.identity] -= match.similarity
            if voted:
                voters += 1
        if voters == 0:
            return {}
        return {
            identity: round(min(max(total / voters, 0.0), 1.0), CONFIDENCE_PRECISION)
            for identity, total in votes.items()
        }

    def _reasons(
        self, column: ColumnDNA, best: CandidateScore, context: HistoryContext
    ) -> tuple[str, ...]:
        contributions: list[tuple[float, str]] = []
        if best.affinity > 0.0:
            if best.learned:
                text = (
                    f"Pattern {column.primary_pattern} learned from past reviews "
                    f"(affinity {best.affinity:.2f})"
                )
            else:
                text = (
                    f"Pattern {column.primary_pattern} matches "
                    f"{best.target.identity} (affinity {best.affinity:.2f})"
                )
            contributions.append((self.weights.pattern * best.affinity, text))
        if best.name.score > 0.0:
            via = " synonym" if best.name.via_synonym else ""
            contributions.append(
                (
                    self.weights.name * best.name.score,
                    f"Name similarity {best.name.score:.2f} with{via} "
                    f"'{best.name.matched}'",
                )
            )
        if best.history > 0.0:
            contributions.append(
                (
                    self.weights.history * best.history,
                    f"Historical precedent {best.history:.2f} from similar migrations",
                )
            )
        # Stable sort keeps pattern, name, history order on equal contributions.
        contributions.sort(key=lambda item: item[0], reverse=True)
        reasons = [text for _, text in contributions]
        if not context.corpus_available:
            reasons.append(DEGRADED_REASON)
        return tuple(reasons)
