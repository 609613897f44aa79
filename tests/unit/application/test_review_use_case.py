"""Tests for the review session use case."""

from pathlib import Path
from unittest.mock import Mock

import pytest

from intelligent_migration.application.analysis_use_case import (
    AnalysisDependencies,
    AnalyzeSourceUseCase,
)
from intelligent_migration.application.models import (
    AnalyzeSourceRequest,
    ConfirmSessionRequest,
)
from intelligent_migration.application.review_use_case import (
    ReviewDependencies,
    ReviewSessionUseCase,
)
from intelligent_migration.domain.entities.feedback import ConfirmedMapping
from intelligent_migration.domain.entities.session import SessionState
from intelligent_migration.domain.entities.source_dna import SourceData
from intelligent_migration.domain.exceptions import (
    InvalidSessionTransitionError,
    SessionNotFoundError,
)
from intelligent_migration.domain.services.mapping import MappingSuggester
from intelligent_migration.infrastructure.logging import NullLogger
from intelligent_migration.infrastructure.repositories import (
    InMemorySessionStore,
    InMemorySimilarityIndex,
)


class TestReviewSessionUseCase:
    """Tests for ReviewSessionUseCase."""

    @pytest.fixture
    def wiring(self, staff_schema, extractor):
        """Analysis and review use cases sharing one store and one corpus."""
        source_repository = Mock()
        source_repository.read_source.return_value = SourceData(
            source_system=None,
            source_type="CSV",
            rows=[
                {"first_name": "John", "emp_email": "john@hospital.org"},
                {"first_name": "Jane", "emp_email": "jane@hospital.org"},
            ],
        )
        store = InMemorySessionStore()
        index = InMemorySimilarityIndex()
        logger = NullLogger()
        analysis = AnalyzeSourceUseCase(
            AnalysisDependencies(
                logger=logger,
                source_repository=source_repository,
                extractor=extractor,
                suggester=MappingSuggester(staff_schema, index),
                session_store=store,
            )
        )
        review = ReviewSessionUseCase(
            ReviewDependencies(logger=logger, session_store=store, similarity_index=index)
        )
        return analysis, review, store, index

    def test_confirm_appends_history(self, wiring):
        """Test that confirming writes one record and closes the session."""
        analysis, review, store, index = wiring
        response = analysis.execute(AnalyzeSourceRequest(Path("staff.csv")))
        confirmed = [
            ConfirmedMapping(
                source_column="first_name",
                target_table="staff",
                target_column="first_name",
            ),
            ConfirmedMapping(
                source_column="emp_email",
                target_table="contact",
                target_column="email_address",
            ),
        ]

        result = review.confirm(ConfirmSessionRequest(response.dna_id, confirmed))

        assert len(index) == 1
        assert index.records()[0] == result.record
        assert result.accepted == 1
        assert result.substituted == 1
        assert result.skipped == 0
        assert store.get(response.dna_id).state is SessionState.CONFIRMED

    def test_second_analysis_finds_the_first(self, wiring):
        """Test that a confirmed migration is retrieved for a similar source."""
        analysis, review, _, _ = wiring
        first = analysis.execute(AnalyzeSourceRequest(Path("staff.csv")))
        review.confirm(ConfirmSessionRequest(first.dna_id, []))

        second = analysis.execute(AnalyzeSourceRequest(Path("staff_again.csv")))

        assert second.dna_id == "dna-2"
        assert [m.dna_id for m in second.similar_past_migrations] == ["dna-1"]
        assert second.similar_past_migrations[0].similarity == pytest.approx(1.0)

    def test_unknown_session(self, wiring):
        """Test that confirming an unknown session raises."""
        _, review, _, _ = wiring
        with pytest.raises(SessionNotFoundError):
            review.confirm(ConfirmSessionRequest("missing", []))

    def test_abandon_writes_nothing(self, wiring):
        """Test that abandoning leaves the corpus untouched."""
        analysis, review, store, index = wiring
        response = analysis.execute(AnalyzeSourceRequest(Path("staff.csv")))

        session = review.abandon(response.dna_id)

        assert session.state is SessionState.ABANDONED
        assert store.get(response.dna_id).state is SessionState.ABANDONED
        assert len(index) == 0
        with pytest.raises(InvalidSessionTransitionError):
            review.confirm(ConfirmSessionRequest(response.dna_id, []))
