from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.exceptions import SessionNotFoundError
from ..domain.services.feedback.feedback_loop import FeedbackLoop
from .models import ConfirmSessionResponse

if TYPE_CHECKING:
    from ..domain.entities.session import MigrationSession
    from .models import ConfirmSessionRequest
    from .ports.repositories import SessionStorePort, SimilarityIndexPort
    from .ports.services import LoggerPort


@dataclass(slots=True)
class ReviewDependencies:
    logger: LoggerPort
    session_store: SessionStorePort
    similarity_index: SimilarityIndexPort


class ReviewSessionUseCase:
    """Close review sessions: confirm into the corpus or abandon."""

    def __init__(self, dependencies: ReviewDependencies) -> None:
        super().__init__()
        self.logger = dependencies.logger
        self._session_store = dependencies.session_store
        self._feedback = FeedbackLoop(dependencies.similarity_index)

    def confirm(self, request: ConfirmSessionRequest) -> ConfirmSessionResponse:
        """Record the reviewer's decisions as a new history record.

        Raises:
            SessionNotFoundError: No open session has this dna_id
            InvalidSessionTransitionError: The session is not under review
            FeedbackError: The decisions do not fit the session's columns
            CorpusUnavailableError: The corpus could not be written
        """
        session = self._require(request.dna_id)
        record = self._feedback.submit(session, request.confirmed)
        self._session_store.save(session)
        self.logger.log_feedback_recorded(record)
        return ConfirmSessionResponse(dna_id=request.dna_id, record=record)

    def abandon(self, dna_id: str) -> MigrationSession:
        session = self._require(dna_id)
        self._feedback.abandon(session)
        self._session_store.save(session)
        self.logger.info(f"Session {dna_id} abandoned; nothing was written to history")
        return session

    def _require(self, dna_id: str) -> MigrationSession:
        session = self._session_store.get(dna_id)
        if session is None:
            raise SessionNotFoundError(f"No review session for dna_id {dna_id}")
        return session
