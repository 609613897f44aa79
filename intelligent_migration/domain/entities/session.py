from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import StrEnum
import threading
from typing import TYPE_CHECKING

from ..exceptions import InvalidSessionTransitionError

if TYPE_CHECKING:
    from .history import SimilarMigration
    from .mapping import MappingSuggestion
    from .source_dna import SourceDNA


class SessionState(StrEnum):
    PROFILED = "profiled"
    SUGGESTED = "suggested"
    UNDER_REVIEW = "under_review"
    CONFIRMED = "confirmed"
    ABANDONED = "abandoned"


_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.PROFILED: frozenset({SessionState.SUGGESTED, SessionState.ABANDONED}),
    SessionState.SUGGESTED: frozenset(
        {SessionState.UNDER_REVIEW, SessionState.ABANDONED}
    ),
    SessionState.UNDER_REVIEW: frozenset(
        {SessionState.CONFIRMED, SessionState.ABANDONED}
    ),
    SessionState.CONFIRMED: frozenset(),
    SessionState.ABANDONED: frozenset(),
}


def _empty_suggestions() -> list[MappingSuggestion]:
    return []


def _empty_similar() -> list[SimilarMigration]:
    return []


@dataclass(slots=True)
class MigrationSession:
    source_dna: SourceDNA
    state: SessionState = SessionState.PROFILED
    suggestions: list[MappingSuggestion] = field(default_factory=_empty_suggestions)
    similar_migrations: list[SimilarMigration] = field(default_factory=_empty_similar)
    _guard: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    @property
    def dna_id(self) -> str:
        return self.source_dna.dna_id

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self.state]

    def suggestion_for(self, source_column: str) -> MappingSuggestion | None:
        for suggestion in self.suggestions:
            if suggestion.source_column == source_column:
                return suggestion
        return None

    @contextmanager
    def exclusive(self) -> Iterator[MigrationSession]:
        """Hold the session while a review decision is written.

        Raises:
            InvalidSessionTransitionError: Another decision holds the session
        """
        if not self._guard.acquire(blocking=False):
            raise InvalidSessionTransitionError(
                f"Session {self.dna_id} is busy with another review decision"
            )
        try:
            yield self
        finally:
            self._guard.release()

    def mark_suggested(
        self,
        suggestions: list[MappingSuggestion],
        similar_migrations: list[SimilarMigration] | None = None,
    ) -> None:
        self._transition(SessionState.SUGGESTED)
        self.suggestions = list(suggestions)
        self.similar_migrations = list(similar_migrations or [])

    def begin_review(self) -> None:
        self._transition(SessionState.UNDER_REVIEW)

    def confirm(self) -> None:
        self._transition(SessionState.CONFIRMED)

    def abandon(self) -> None:
        self._transition(SessionState.ABANDONED)

    def _transition(self, target: SessionState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise InvalidSessionTransitionError(
                f"Session {self.dna_id}: cannot move from {self.state} to {target}"
            )
        self.state = target
