"""Review feedback.

A confirmed review becomes one new ``HistoricalMigrationRecord``; nothing
already in the corpus is ever edited. Learning reads the corpus back:
accepted and substituted targets count as positive evidence, the targets a
reviewer substituted away from count as negative evidence, and skipped
columns count as nothing.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import UTC, datetime
from uuid import uuid4

from ...entities.data_pattern import DataPattern
from ...entities.feedback import (
    ConfirmedMapping,
    MappingCorrection,
    MappingOutcome,
    ReviewDecision,
)
from ...entities.history import HistoricalMigrationRecord
from ...entities.session import MigrationSession, SessionState
from ...exceptions import FeedbackError, InvalidSessionTransitionError
from ..similarity.index import HistoryIndex

AffinityKey = tuple[DataPattern, str]


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _new_record_id() -> str:
    return uuid4().hex


class FeedbackLoop:
    def __init__(
        self,
        index: HistoryIndex,
        *,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_record_id,
    ) -> None:
        super().__init__()
        self.index = index
        self._clock = clock
        self._id_factory = id_factory

    def submit(
        self, session: MigrationSession, confirmed: Sequence[ConfirmedMapping]
    ) -> HistoricalMigrationRecord:
        """Write the outcome of a finished review and confirm the session.

        Columns without a confirmation are recorded as skipped. The session
        is held exclusively from the state check to the state change, so only
        one confirmation writes. The corpus write happens before the state
        change: a failed write leaves the session under review and nothing in
        the corpus.

        Raises:
            InvalidSessionTransitionError: The session is not under review, or
                another decision on it is in progress
            FeedbackError: A confirmation names an unknown or repeated column
            CorpusUnavailableError: The corpus rejected the write
        """
        with session.exclusive():
            if session.state is not SessionState.UNDER_REVIEW:
                raise InvalidSessionTransitionError(
                    f"Session {session.dna_id} is {session.state}; only sessions "
                    "under review can be confirmed"
                )
            record = self.build_record(session, confirmed)
            self.index.add(record)
            session.confirm()
        return record

    def abandon(self, session: MigrationSession) -> None:
        with session.exclusive():
            session.abandon()

    def build_record(
        self, session: MigrationSession, confirmed: Sequence[ConfirmedMapping]
    ) -> HistoricalMigrationRecord:
        by_column = _index_confirmations(session, confirmed)
        outcomes: list[MappingOutcome] = []
        mappings: list[ConfirmedMapping] = []
        for suggestion in session.suggestions:
            decision = by_column.get(suggestion.source_column)
            if decision is None:
                decision = ConfirmedMapping.skip(suggestion.source_column)
            column = session.source_dna.column(suggestion.source_column)
            final = decision.target
            if final is None:
                verdict = ReviewDecision.SKIPPED
            elif final == suggestion.target:
                verdict = ReviewDecision.ACCEPTED
            else:
                verdict = ReviewDecision.SUBSTITUTED
            mappings.append(decision)
            outcomes.append(
                MappingOutcome(
                    source_column=suggestion.source_column,
                    normalized_name=column.normalized_name if column else "",
                    primary_pattern=(
                        column.primary_pattern if column else DataPattern.UNKNOWN
                    ),
                    suggested=suggestion.target,
                    suggested_confidence=suggestion.confidence,
                    final=final,
                    decision=verdict,
                )
            )

        dna = session.source_dna
        return HistoricalMigrationRecord(
            record_id=self._id_factory(),
            dna_id=dna.dna_id,
            source_system=dna.source_system,
            source_type=dna.source_type,
            structure_hash=dna.structure_hash,
            signature_vector=dna.signature_vector,
            timestamp=self._clock(),
            confirmed_mappings=tuple(mappings),
            outcomes=tuple(outcomes),
        )


def _index_confirmations(
    session: MigrationSession, confirmed: Sequence[ConfirmedMapping]
) -> dict[str, ConfirmedMapping]:
    known = {suggestion.source_column for suggestion in session.suggestions}
    by_column: dict[str, ConfirmedMapping] = {}
    for mapping in confirmed:
        if mapping.source_column not in known:
            raise FeedbackError(
                f"Column '{mapping.source_column}' is not part of session {session.dna_id}"
            )
        if mapping.source_column in by_column:
            raise FeedbackError(
                f"Column '{mapping.source_column}' was confirmed more than once"
            )
        by_column[mapping.source_column] = mapping
    return by_column


def learned_affinities(
    records: Iterable[HistoricalMigrationRecord],
) -> dict[AffinityKey, float]:
    """Pattern-to-field affinity learned from past reviews.

    Returns:
        ``(pattern, "table.column") -> affinity`` with
        ``max(0, positives - negatives) / (positives + negatives + 1)``;
        skipped columns contribute nothing
    """
    positives: dict[AffinityKey, int] = defaultdict(int)
    negatives: dict[AffinityKey, int] = defaultdict(int)
    for record in records:
        for outcome in record.learnable_outcomes:
            if outcome.final is None or outcome.primary_pattern is DataPattern.UNKNOWN:
                continue
            positives[(outcome.primary_pattern, outcome.final.identity)] += 1
        for correction in record.corrections:
            negatives[(correction.pattern, correction.rejected.identity)] += 1

    learned: dict[AffinityKey, float] = {}
    for key in positives.keys() | negatives.keys():
        hits, misses = positives.get(key, 0), negatives.get(key, 0)
        learned[key] = round(max(hits - misses, 0) / (hits + misses + 1), 4)
    return learned


def corrections_for(
    records: Iterable[HistoricalMigrationRecord],
    normalized_name: str,
    pattern: DataPattern | None = None,
) -> tuple[MappingCorrection, ...]:
    """Substitutions recorded for a column name, oldest first."""
    ordered = sorted(records, key=lambda record: record.timestamp)
    return tuple(
        correction
        for record in ordered
        for correction in record.corrections
        if correction.normalized_name == normalized_name
        and (pattern is None or correction.pattern is pattern)
    )


def affinity_for(
    learned: Mapping[AffinityKey, float], pattern: DataPattern, identity: str
) -> float:
    return learned.get((pattern, identity), 0.0)
