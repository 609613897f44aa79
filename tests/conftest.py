from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from itertools import count

import pytest

from intelligent_migration.domain.entities.data_pattern import DataPattern
from intelligent_migration.domain.entities.feedback import (
    ConfirmedMapping,
    MappingOutcome,
    ReviewDecision,
)
from intelligent_migration.domain.entities.history import HistoricalMigrationRecord
from intelligent_migration.domain.entities.mapping import TargetField
from intelligent_migration.domain.entities.source_dna import SourceData, SourceDNA
from intelligent_migration.domain.entities.target_schema import TargetSchema
from intelligent_migration.domain.services.dna.extractor import SourceDNAExtractor
from intelligent_migration.infrastructure.repositories.target_schema_repository import (
    TargetSchemaRepository,
)

FIXED_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)

FIRST_NAMES = [
    "John", "Jane", "Bob", "Alice", "Maria", "David", "Sarah", "Michael",
    "Laura", "James", "Emma", "Robert", "Olivia", "William", "Sophia",
    "Daniel", "Grace", "Thomas", "Chloe", "Henry",
]


@pytest.fixture(scope="session")
def default_schema() -> TargetSchema:
    """The bundled healthcare target schema."""
    return TargetSchemaRepository().load()


@pytest.fixture
def staff_schema() -> TargetSchema:
    """A two-table schema small enough to reason about by hand."""
    return TargetSchema(
        tables={
            "staff": {
                "first_name": (DataPattern.NAME_FIRST, DataPattern.TEXT_SHORT),
                "last_name": (DataPattern.NAME_LAST, DataPattern.TEXT_SHORT),
                "email": (DataPattern.EMAIL,),
                "phone": (DataPattern.PHONE,),
                "state": (DataPattern.STATE_CODE,),
                "hire_date": (DataPattern.DATE_ISO, DataPattern.DATE),
            },
            "contact": {
                "email_address": (DataPattern.EMAIL,),
                "display_name": (DataPattern.NAME_FULL, DataPattern.TEXT_SHORT),
            },
        },
        synonyms={"email": ("e_mail", "mail"), "first_name": ("given_name",)},
    )


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Sequential ids: dna-1, dna-2, ..."""
    counter = count(1)
    return lambda: f"dna-{next(counter)}"


@pytest.fixture
def extractor(id_factory: Callable[[], str]) -> SourceDNAExtractor:
    return SourceDNAExtractor(clock=lambda: FIXED_TIME, id_factory=id_factory)


@pytest.fixture
def first_name_source() -> SourceData:
    """100 rows: 2% null first names with 85 distinct values, plus emails."""
    names: list[str | None] = [None, None]
    for index in range(85):
        names.append(f"{FIRST_NAMES[index % len(FIRST_NAMES)]}{'x' * (index // 20)}")
    names.extend(["John"] * 13)
    emails = [f"user{index}@hospital.org" for index in range(100)]
    return SourceData(
        source_system=None,
        source_type="CSV",
        rows=[
            {"first_name": name, "emp_email": email}
            for name, email in zip(names, emails, strict=True)
        ],
    )


def make_record(
    dna_id: str,
    vector: tuple[float, ...],
    *,
    minutes: int = 0,
    outcomes: tuple[MappingOutcome, ...] = (),
) -> HistoricalMigrationRecord:
    return HistoricalMigrationRecord(
        record_id=f"rec-{dna_id}",
        dna_id=dna_id,
        source_system="EPIC",
        source_type="CSV",
        structure_hash="hash",
        signature_vector=vector,
        timestamp=FIXED_TIME + timedelta(minutes=minutes),
        confirmed_mappings=tuple(
            ConfirmedMapping(
                source_column=outcome.source_column,
                target_table=outcome.final.table,
                target_column=outcome.final.column,
            )
            if outcome.final is not None
            else ConfirmedMapping.skip(outcome.source_column)
            for outcome in outcomes
        ),
        outcomes=outcomes,
    )


def make_outcome(
    name: str,
    pattern: DataPattern,
    suggested: str,
    final: str | None,
    decision: ReviewDecision,
) -> MappingOutcome:
    def field(identity: str) -> TargetField:
        table, column = identity.split(".")
        return TargetField(table=table, column=column)

    return MappingOutcome(
        source_column=name,
        normalized_name=name,
        primary_pattern=pattern,
        suggested=field(suggested),
        suggested_confidence=0.8,
        final=field(final) if final is not None else None,
        decision=decision,
    )


@pytest.fixture
def record_factory() -> Callable[..., HistoricalMigrationRecord]:
    return make_record


@pytest.fixture
def outcome_factory() -> Callable[..., MappingOutcome]:
    return make_outcome


@pytest.fixture
def make_dna(extractor: SourceDNAExtractor) -> Callable[..., SourceDNA]:
    """Extract a SourceDNA from keyword columns, e.g. ``make_dna(email=[...])``."""

    def build(**columns: list[object]) -> SourceDNA:
        if not columns:
            columns = {"first_name": ["John", "Jane"]}
        length = max(len(values) for values in columns.values())
        rows = [
            {name: values[i] if i < len(values) else None for name, values in columns.items()}
            for i in range(length)
        ]
        return extractor.extract(
            SourceData(source_system=None, source_type="CSV", rows=rows)
        )

    return build
