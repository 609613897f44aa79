"""Unit tests for FeedbackLoop and corpus learning."""

from __future__ import annotations

from datetime import UTC, datetime
import threading

import pytest

from intelligent_migration.domain.entities.data_pattern import DataPattern
from intelligent_migration.domain.entities.feedback import ConfirmedMapping, ReviewDecision
from intelligent_migration.domain.entities.history import HistoricalMigrationRecord
from intelligent_migration.domain.entities.session import MigrationSession, SessionState
from intelligent_migration.domain.exceptions import (
    CorpusUnavailableError,
    FeedbackError,
    InvalidSessionTransitionError,
)
from intelligent_migration.domain.services.feedback.feedback_loop import (
    FeedbackLoop,
    corrections_for,
    learned_affinities,
)
from intelligent_migration.domain.services.mapping import MappingSuggester

REVIEWED_AT = datetime(2024, 3, 2, 9, 30, tzinfo=UTC)


class ListIndex:
    def __init__(self) -> None:
        self.added: list[HistoricalMigrationRecord] = []

    def add(self, record: HistoricalMigrationRecord) -> None:
        self.added.append(record)

    def query(self, vector, k):
        return []

    def records(self) -> tuple[HistoricalMigrationRecord, ...]:
        return tuple(self.added)


class FailingIndex(ListIndex):
    def add(self, record: HistoricalMigrationRecord) -> None:
        raise CorpusUnavailableError("disk full")


class BlockingIndex(ListIndex):
    """Holds every write until the test releases it."""

    def __init__(self) -> None:
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()

    def add(self, record: HistoricalMigrationRecord) -> None:
        self.entered.set()
        assert self.release.wait(timeout=5)
        super().add(record)


@pytest.fixture
def index() -> ListIndex:
    return ListIndex()


@pytest.fixture
def loop(index: ListIndex) -> FeedbackLoop:
    return FeedbackLoop(index, clock=lambda: REVIEWED_AT, id_factory=lambda: "rec-1")


@pytest.fixture
def session(make_dna, staff_schema) -> MigrationSession:
    """A session under review with first_name, emp_email and unknown_field."""
    dna = make_dna(
        first_name=["John", "Jane", "Maria", "David"],
        emp_email=["a@hospital.org", "b@hospital.org", "c@hospital.org", "d@hospital.org"],
        unknown_field=["ab1", "ab1", "cd2", "ab1"],
    )
    run = MappingSuggester(staff_schema).suggest(dna)
    session = MigrationSession(source_dna=dna)
    session.mark_suggested(list(run.suggestions))
    session.begin_review()
    return session


def accept(session: MigrationSession, column: str) -> ConfirmedMapping:
    suggestion = session.suggestion_for(column)
    assert suggestion is not None
    return ConfirmedMapping(
        source_column=column,
        target_table=suggestion.target_table,
        target_column=suggestion.target_column,
    )


def decisions(record: HistoricalMigrationRecord) -> dict[str, ReviewDecision]:
    return {outcome.source_column: outcome.decision for outcome in record.outcomes}


class TestSubmit:
    """Tests for FeedbackLoop.submit."""

    def test_session_fixture_suggestions(self, session):
        assert session.suggestion_for("first_name").target.identity == "staff.first_name"
        assert session.suggestion_for("emp_email").target.identity == "staff.email"
        assert session.suggestion_for("unknown_field").is_unmapped

    def test_accepting_writes_one_record(self, loop, index, session):
        """Accepted suggestions are appended as a single record."""
        record = loop.submit(
            session, [accept(session, "first_name"), accept(session, "emp_email")]
        )
        assert index.added == [record]
        assert session.state is SessionState.CONFIRMED
        assert record.record_id == "rec-1"
        assert record.timestamp == REVIEWED_AT
        assert record.dna_id == session.dna_id
        assert record.signature_vector == session.source_dna.signature_vector
        assert decisions(record) == {
            "first_name": ReviewDecision.ACCEPTED,
            "emp_email": ReviewDecision.ACCEPTED,
            "unknown_field": ReviewDecision.SKIPPED,
        }

    def test_missing_columns_are_skipped(self, loop, session):
        record = loop.submit(session, [])
        assert set(decisions(record).values()) == {ReviewDecision.SKIPPED}
        assert all(mapping.skipped for mapping in record.confirmed_mappings)
        assert record.learnable_outcomes == ()

    def test_skip_only_review_teaches_nothing(self, loop, index, session):
        """A record of skipped columns leaves learned affinities empty."""
        loop.submit(session, [ConfirmedMapping.skip("first_name")])
        assert learned_affinities(index.records()) == {}

    def test_substitution_is_recorded_as_correction(self, loop, session):
        substitute = ConfirmedMapping(
            source_column="emp_email",
            target_table="contact",
            target_column="email_address",
        )
        record = loop.submit(session, [substitute])
        assert decisions(record)["emp_email"] is ReviewDecision.SUBSTITUTED
        (correction,) = record.corrections
        assert correction.normalized_name == "emp_email"
        assert correction.pattern is DataPattern.EMAIL
        assert correction.rejected.identity == "staff.email"
        assert correction.chosen.identity == "contact.email_address"

    def test_mapping_an_unmapped_column_is_not_a_correction(self, loop, session):
        """Choosing a target for an UNMAPPED column rejects nothing."""
        chosen = ConfirmedMapping(
            source_column="unknown_field", target_table="staff", target_column="state"
        )
        record = loop.submit(session, [chosen])
        assert decisions(record)["unknown_field"] is ReviewDecision.SUBSTITUTED
        assert record.corrections == ()
        assert record.import_plan() == {"unknown_field": "staff.state"}

    def test_unknown_column_is_rejected(self, loop, index, session):
        with pytest.raises(FeedbackError, match="not part of session"):
            loop.submit(session, [ConfirmedMapping.skip("salary")])
        assert index.added == []
        assert session.state is SessionState.UNDER_REVIEW

    def test_duplicate_column_is_rejected(self, loop, session):
        with pytest.raises(FeedbackError, match="more than once"):
            loop.submit(
                session,
                [accept(session, "first_name"), ConfirmedMapping.skip("first_name")],
            )

    def test_requires_review_state(self, loop, index, make_dna):
        session = MigrationSession(source_dna=make_dna())
        session.mark_suggested([])
        with pytest.raises(InvalidSessionTransitionError):
            loop.submit(session, [])
        assert index.added == []

    def test_cannot_confirm_twice(self, loop, index, session):
        loop.submit(session, [])
        with pytest.raises(InvalidSessionTransitionError):
            loop.submit(session, [])
        assert len(index.added) == 1

    def test_failed_write_keeps_session_open(self, session):
        """A corpus failure leaves the session under review."""
        loop = FeedbackLoop(FailingIndex())
        with pytest.raises(CorpusUnavailableError):
            loop.submit(session, [])
        assert session.state is SessionState.UNDER_REVIEW

    def test_retry_after_failed_write(self, index, session):
        with pytest.raises(CorpusUnavailableError):
            FeedbackLoop(FailingIndex()).submit(session, [])
        FeedbackLoop(index).submit(session, [])
        assert session.state is SessionState.CONFIRMED
        assert len(index.added) == 1

    def test_concurrent_confirmations_write_once(self, session):
        """A second confirmation during a pending write is rejected unwritten."""
        index = BlockingIndex()
        errors: list[Exception] = []

        def confirm() -> None:
            try:
                FeedbackLoop(index).submit(session, [])
            except InvalidSessionTransitionError as exc:
                errors.append(exc)

        first = threading.Thread(target=confirm)
        first.start()
        assert index.entered.wait(timeout=5)

        with pytest.raises(InvalidSessionTransitionError, match="busy"):
            FeedbackLoop(index).submit(session, [])
        with pytest.raises(InvalidSessionTransitionError, match="busy"):
            FeedbackLoop(index).abandon(session)

        index.release.set()
        first.join(timeout=5)

        assert errors == []
        assert len(index.added) == 1
        assert session.state is SessionState.CONFIRMED


class TestAbandon:
    """Tests for FeedbackLoop.abandon."""

    def test_abandon_writes_nothing(self, loop, index, session):
        loop.abandon(session)
        assert session.state is SessionState.ABANDONED
        assert index.added == []

    def test_abandoned_session_cannot_be_confirmed(self, loop, session):
        loop.abandon(session)
        with pytest.raises(InvalidSessionTransitionError):
            loop.submit(session, [])


class TestLearning:
    """Tests for learned_affinities and corrections_for."""

    def test_learned_affinity_formula(self, record_factory, outcome_factory):
        """Affinity is max(0, hits - misses) / (hits + misses + 1)."""
        accepted = outcome_factory(
            "email", DataPattern.EMAIL, "staff.email", "staff.email", ReviewDecision.ACCEPTED
        )
        substituted = outcome_factory(
            "email",
            DataPattern.EMAIL,
            "staff.email",
            "contact.email_address",
            ReviewDecision.SUBSTITUTED,
        )
        records = [
            record_factory("a", (1.0,), outcomes=(accepted,)),
            record_factory("b", (1.0,), outcomes=(accepted,)),
            record_factory("c", (1.0,), outcomes=(substituted,)),
        ]
        learned = learned_affinities(records)
        assert learned[(DataPattern.EMAIL, "staff.email")] == pytest.approx(0.25)
        assert learned[(DataPattern.EMAIL, "contact.email_address")] == pytest.approx(0.5)

    def test_rejections_alone_floor_at_zero(self, record_factory, outcome_factory):
        substituted = outcome_factory(
            "email",
            DataPattern.EMAIL,
            "staff.email",
            "contact.email_address",
            ReviewDecision.SUBSTITUTED,
        )
        learned = learned_affinities([record_factory("a", (1.0,), outcomes=(substituted,))])
        assert learned[(DataPattern.EMAIL, "staff.email")] == 0.0

    def test_unknown_pattern_is_not_learned(self, record_factory, outcome_factory):
        accepted = outcome_factory(
            "x", DataPattern.UNKNOWN, "staff.state", "staff.state", ReviewDecision.ACCEPTED
        )
        assert learned_affinities([record_factory("a", (1.0,), outcomes=(accepted,))]) == {}

    def test_corrections_are_oldest_first(self, record_factory, outcome_factory):
        def substitution(final: str):
            return outcome_factory(
                "phone", DataPattern.PHONE, "staff.phone", final, ReviewDecision.SUBSTITUTED
            )

        newer = record_factory(
            "new", (1.0,), minutes=10, outcomes=(substitution("contact.display_name"),)
        )
        older = record_factory("old", (1.0,), outcomes=(substitution("staff.state"),))
        corrections = corrections_for([newer, older], "phone")
        assert [c.chosen.identity for c in corrections] == [
            "staff.state",
            "contact.display_name",
        ]
        assert corrections_for([newer, older], "phone", DataPattern.EMAIL) == ()
        assert corrections_for([newer, older], "email") == ()
