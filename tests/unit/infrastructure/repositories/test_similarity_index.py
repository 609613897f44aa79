"""Unit tests for the history corpus adapters."""

from pathlib import Path
import threading

import pytest

from intelligent_migration.application.ports import SimilarityIndexPort
from intelligent_migration.domain.exceptions import CorpusUnavailableError
from intelligent_migration.infrastructure.repositories import (
    InMemorySimilarityIndex,
    JsonlSimilarityIndex,
)


class TestInMemorySimilarityIndex:
    """Tests for InMemorySimilarityIndex."""

    def test_implements_port(self):
        assert isinstance(InMemorySimilarityIndex(), SimilarityIndexPort)

    def test_query_ranks_by_similarity(self, record_factory):
        """Test that the closest record comes first."""
        index = InMemorySimilarityIndex(
            [record_factory("far", (0.0, 1.0)), record_factory("near", (1.0, 0.1))]
        )
        matches = index.query((1.0, 0.0), 2)
        assert [m.dna_id for m in matches] == ["near", "far"]
        assert matches[1].similarity == 0.0

    def test_add_is_append_only(self, record_factory):
        """Test that earlier snapshots are unaffected by later appends."""
        index = InMemorySimilarityIndex([record_factory("a", (1.0,))])
        before = index.records()
        index.add(record_factory("b", (1.0,)))
        assert [r.dna_id for r in before] == ["a"]
        assert [r.dna_id for r in index.records()] == ["a", "b"]
        assert len(index) == 2

    def test_concurrent_adds_are_all_kept(self, record_factory):
        index = InMemorySimilarityIndex()
        threads = [
            threading.Thread(target=index.add, args=(record_factory(f"r{i}", (1.0,)),))
            for i in range(20)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(index) == 20


class TestJsonlSimilarityIndex:
    """Tests for JsonlSimilarityIndex."""

    def test_implements_port(self, tmp_path: Path):
        assert isinstance(JsonlSimilarityIndex(tmp_path / "c.jsonl"), SimilarityIndexPort)

    def test_missing_file_is_empty_corpus(self, tmp_path: Path):
        index = JsonlSimilarityIndex(tmp_path / "corpus.jsonl")
        assert index.records() == ()
        assert index.query((1.0,), 5) == []

    def test_records_survive_reload(self, tmp_path: Path, record_factory, outcome_factory):
        """Test that appended records are read back by a fresh instance."""
        from intelligent_migration.domain.entities.data_pattern import DataPattern
        from intelligent_migration.domain.entities.feedback import ReviewDecision

        path = tmp_path / "nested" / "corpus.jsonl"
        outcome = outcome_factory(
            "email", DataPattern.EMAIL, "hc_staff.email", "hc_staff.email",
            ReviewDecision.ACCEPTED,
        )
        first = record_factory("a", (0.5, 0.5), outcomes=(outcome,))
        second = record_factory("b", (1.0, 0.0), minutes=5)
        writer = JsonlSimilarityIndex(path)
        writer.add(first)
        writer.add(second)

        reader = JsonlSimilarityIndex(path)

        assert reader.records() == (first, second)
        assert len(path.read_text(encoding="utf-8").splitlines()) == 2
        assert reader.query((1.0, 0.0), 1)[0].dna_id == "b"

    def test_append_does_not_rewrite(self, tmp_path: Path, record_factory):
        """Test that existing lines are left byte-for-byte intact."""
        path = tmp_path / "corpus.jsonl"
        index = JsonlSimilarityIndex(path)
        index.add(record_factory("a", (1.0,)))
        original = path.read_bytes()
        index.add(record_factory("b", (1.0,)))
        assert path.read_bytes().startswith(original)

    def test_corrupt_file(self, tmp_path: Path):
        """Test that an unparsable corpus raises CorpusUnavailableError."""
        path = tmp_path / "corpus.jsonl"
        path.write_text('{"record_id": "x"}\nnot json\n', encoding="utf-8")
        with pytest.raises(CorpusUnavailableError, match="corrupt"):
            JsonlSimilarityIndex(path).records()

    def test_unreadable_file(self, tmp_path: Path):
        path = tmp_path / "corpus.jsonl"
        path.write_bytes(b"\xff\xfe\x00\n")
        with pytest.raises(CorpusUnavailableError, match="Cannot read"):
            JsonlSimilarityIndex(path).query((1.0,), 3)

    def test_unwritable_location(self, tmp_path: Path, record_factory):
        """Test that a write failure raises CorpusUnavailableError."""
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        index = JsonlSimilarityIndex(blocker / "corpus.jsonl")
        with pytest.raises(CorpusUnavailableError):
            index.add(record_factory("a", (1.0,)))

    def test_torn_last_line_is_skipped_and_repaired(self, tmp_path: Path, record_factory):
        """Test that an interrupted append does not lock the corpus."""
        path = tmp_path / "corpus.jsonl"
        first = record_factory("a", (1.0,))
        JsonlSimilarityIndex(path).add(first)
        with path.open("a", encoding="utf-8") as handle:
            handle.write('{"record_id": "rec-torn", "dna_')

        index = JsonlSimilarityIndex(path)
        assert index.records() == (first,)

        second = record_factory("b", (1.0,), minutes=5)
        index.add(second)

        assert JsonlSimilarityIndex(path).records() == (first, second)
        assert "rec-torn" not in path.read_text(encoding="utf-8")
        assert len(path.read_text(encoding="utf-8").splitlines()) == 2

    def test_unterminated_valid_line_is_kept(self, tmp_path: Path, record_factory):
        """Test that a complete record without a newline is read and extended."""
        path = tmp_path / "corpus.jsonl"
        first = record_factory("a", (1.0,))
        path.write_text(first.model_dump_json(), encoding="utf-8")

        index = JsonlSimilarityIndex(path)
        second = record_factory("b", (1.0,), minutes=5)
        index.add(second)

        assert JsonlSimilarityIndex(path).records() == (first, second)

    def test_corrupt_line_before_torn_tail_still_fails(self, tmp_path: Path):
        path = tmp_path / "corpus.jsonl"
        path.write_text('not json\n{"record_id": "x', encoding="utf-8")
        with pytest.raises(CorpusUnavailableError, match="corrupt at line 1"):
            JsonlSimilarityIndex(path).records()
