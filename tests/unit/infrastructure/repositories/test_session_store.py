"""Unit tests for review session storage."""

from pathlib import Path

import pytest

from intelligent_migration.application.ports import SessionStorePort
from intelligent_migration.domain.entities.session import MigrationSession, SessionState
from intelligent_migration.domain.services.mapping import MappingSuggester
from intelligent_migration.infrastructure.io.exceptions import (
    DataParseError,
    DataSourceNotFoundError,
)
from intelligent_migration.infrastructure.repositories import (
    InMemorySessionStore,
    read_session,
    write_session,
)


@pytest.fixture
def review_session(make_dna, staff_schema) -> MigrationSession:
    dna = make_dna(first_name=["John", "Jane"], emp_email=["a@x.org", "b@x.org"])
    session = MigrationSession(source_dna=dna)
    session.mark_suggested(list(MappingSuggester(staff_schema).suggest(dna).suggestions))
    session.begin_review()
    return session


class TestInMemorySessionStore:
    """Tests for InMemorySessionStore."""

    def test_implements_port(self):
        assert isinstance(InMemorySessionStore(), SessionStorePort)

    def test_save_get_discard(self, review_session):
        store = InMemorySessionStore()
        store.save(review_session)
        assert store.get(review_session.dna_id) is review_session
        assert len(store) == 1
        store.discard(review_session.dna_id)
        assert store.get(review_session.dna_id) is None
        store.discard(review_session.dna_id)


class TestSessionFiles:
    """Tests for write_session and read_session."""

    def test_session_survives_a_file(self, tmp_path: Path, review_session):
        """Test that a written session reads back unchanged."""
        path = tmp_path / "sessions" / "review.json"
        write_session(path, review_session)

        restored = read_session(path)

        assert restored.state is SessionState.UNDER_REVIEW
        assert restored.source_dna == review_session.source_dna
        assert restored.suggestions == review_session.suggestions

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(DataSourceNotFoundError):
            read_session(tmp_path / "missing.json")

    def test_invalid_file(self, tmp_path: Path):
        path = tmp_path / "review.json"
        path.write_text('{"state": "under_review"}', encoding="utf-8")
        with pytest.raises(DataParseError, match="Invalid session file"):
            read_session(path)
