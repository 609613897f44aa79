"""Unit tests for the CLI presenters."""

from io import StringIO

import pytest
from rich.console import Console

from intelligent_migration.application.models import (
    AnalyzeSourceResponse,
    SimilarMigrationSummary,
)
from intelligent_migration.cli.presenters import HistoryPresenter, SuggestionPresenter
from intelligent_migration.domain.entities.data_pattern import DataPattern
from intelligent_migration.domain.entities.feedback import ReviewDecision
from intelligent_migration.domain.entities.mapping import (
    AlternativeMapping,
    MappingSuggestion,
)


@pytest.fixture
def console():
    """Create a console with StringIO for capturing output."""
    return Console(file=StringIO(), force_terminal=False, width=200)


def output(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[attr-defined]


@pytest.fixture
def response():
    """A review payload with one mapped and one unmapped column."""
    return AnalyzeSourceResponse(
        suggestions=[
            MappingSuggestion(
                source_column="emp_email",
                target_table="hc_staff",
                target_column="email",
                confidence=0.889,
                reasons=("Pattern EMAIL matches hc_staff.email (affinity 1.00)",),
                alternative_mappings=(
                    AlternativeMapping(
                        target_table="fhir_patient",
                        target_column="telecom_email",
                        confidence=0.8745,
                    ),
                ),
            ),
            MappingSuggestion.unmapped("legacy_flag"),
        ],
        estimated_accuracy=0.4445,
        similar_past_migrations=[
            SimilarMigrationSummary(dna_id="dna-7", similarity=0.93, source_system="EPIC")
        ],
        warnings=["legacy_flag: column is entirely null"],
    )


class TestSuggestionPresenter:
    """Test suite for SuggestionPresenter."""

    def test_present_tables(self, console, response):
        """Test that suggestions and similar migrations are rendered."""
        SuggestionPresenter(console).present(response)
        text = output(console)

        assert "Mapping Suggestions" in text
        assert "hc_staff.email" in text
        assert "fhir_patient.telecom_email (87%)" in text
        assert "unmapped" in text
        assert "No match found" in text
        assert "Similar Past Migrations" in text
        assert "dna-7" in text
        assert "0.93" in text

    def test_summary(self, console, response):
        SuggestionPresenter(console).present(response)
        text = output(console)

        assert "Mapped: 1/2" in text
        assert "Estimated accuracy: 44%" in text
        assert "legacy_flag: column is entirely null" in text
        assert "corpus unavailable" not in text

    def test_degraded_corpus_is_flagged(self, console, response):
        response.corpus_available = False
        response.similar_past_migrations = []
        SuggestionPresenter(console).present(response)
        text = output(console)

        assert "Migration corpus unavailable" in text
        assert "Similar Past Migrations" not in text

    @pytest.mark.parametrize(
        ("confidence", "style"),
        [(0.95, "green"), (0.8, "green"), (0.6, "yellow"), (0.2, "red")],
    )
    def test_confidence_style(self, confidence, style):
        from intelligent_migration.cli.presenters.suggestions import _confidence_style

        assert _confidence_style(confidence) == style


class TestHistoryPresenter:
    """Test suite for HistoryPresenter."""

    def test_empty_corpus(self, console):
        HistoryPresenter(console).present([])
        assert "Migration corpus is empty" in output(console)

    def test_records_newest_first(self, console, record_factory, outcome_factory):
        """Test that records are listed newest first with decision counts."""
        accepted = outcome_factory(
            "email", DataPattern.EMAIL, "hc_staff.email", "hc_staff.email",
            ReviewDecision.ACCEPTED,
        )
        skipped = outcome_factory(
            "flag", DataPattern.BOOLEAN, "hc_staff.active", None, ReviewDecision.SKIPPED
        )
        older = record_factory("dna-old", (1.0,), outcomes=(accepted, skipped))
        newer = record_factory("dna-new", (1.0,), minutes=30, outcomes=(accepted,))

        HistoryPresenter(console).present([older, newer])
        text = output(console)

        assert "Migration History" in text
        assert text.index("dna-new") < text.index("dna-old")
        assert "2024-03-01 12:30" in text
        assert "Records: 2" in text
