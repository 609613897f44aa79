"""Matcher registry for the closed DataPattern vocabulary.

Every recognized pattern owns exactly one ``PatternMatcher``. The registry is
checked for completeness when this module is imported, so extending
``DataPattern`` without describing how to match the new member fails fast.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
import re

from ...entities.data_pattern import DataPattern
from .npi import validate_npi

NPI_CHECKSUM_DISCOUNT = 0.5


@dataclass(frozen=True, slots=True)
class ValueShape:
    regex: re.Pattern[str]
    specificity: float


@dataclass(frozen=True, slots=True)
class PatternMatcher:
    """How one pattern is recognized.

    ``shapes`` are tried against each sample value; a value scores the best
    specificity among the shapes it matches. ``validator``, when set, must
    also accept the value or the score is multiplied by ``invalid_discount``.
    ``synonyms`` are normalized column names that indicate the pattern.
    """

    pattern: DataPattern
    shapes: tuple[ValueShape, ...]
    synonyms: tuple[str, ...] = ()
    validator: Callable[[str], bool] | None = None
    invalid_discount: float = 1.0
    synonym_set: frozenset[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "synonym_set", frozenset(self.synonyms))

    def value_score(self, value: str) -> float:
        best = 0.0
        for shape in self.shapes:
            if shape.specificity > best and shape.regex.match(value):
                best = shape.specificity
        if best and self.validator is not None and not self.validator(value):
            best *= self.invalid_discount
        return best


def _shape(regex: str, specificity: float, flags: int = 0) -> ValueShape:
    return ValueShape(regex=re.compile(regex, flags), specificity=specificity)


_FHIR_RESOURCES = (
    "Patient|Observation|Condition|MedicationRequest|Procedure|"
    "AllergyIntolerance|Immunization|DiagnosticReport|Encounter|CarePlan|"
    "Practitioner|Organization|Location|Device|Specimen|ServiceRequest|"
    "ClinicalImpression|Goal|RiskAssessment|FamilyMemberHistory"
)
_MONTHS = "Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec"

_MATCHERS = (
    PatternMatcher(
        DataPattern.NPI,
        shapes=(_shape(r"^\d{10}$", 1.0),),
        synonyms=(
            "npi",
            "npi_number",
            "provider_npi",
            "provider_id",
            "national_provider_id",
        ),
        validator=validate_npi,
        invalid_discount=NPI_CHECKSUM_DISCOUNT,
    ),
    PatternMatcher(
        DataPattern.SSN,
        shapes=(
            _shape(r"^\d{3}-\d{2}-\d{4}$", 0.95),
            _shape(r"^XXX-XX-\d{4}$", 0.95),
            _shape(r"^\d{9}$", 0.3),
        ),
        synonyms=("ssn", "social_security", "social_security_number", "ssn_last4"),
    ),
    PatternMatcher(
        DataPattern.PHONE,
        shapes=(
            _shape(r"^\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}$", 0.95),
            _shape(r"^\+?1?[-.\s]?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}$", 0.95),
        ),
        synonyms=(
            "phone",
            "phone_number",
            "telephone",
            "tel",
            "mobile",
            "cell",
            "cell_phone",
            "work_phone",
            "home_phone",
            "fax",
        ),
    ),
    PatternMatcher(
        DataPattern.EMAIL,
        shapes=(_shape(r"^[^\s@]+@[^\s@]+\.[^\s@]+$", 1.0),),
        synonyms=("email", "email_address", "e_mail", "mail", "work_email"),
    ),
    PatternMatcher(
        DataPattern.DATE,
        shapes=(
            _shape(r"^\d{1,2}/\d{1,2}/\d{2,4}$", 0.9),
            _shape(r"^\d{1,2}-\d{1,2}-\d{2,4}$", 0.9),
            _shape(rf"^({_MONTHS})[a-z]*\.?\s+\d{{1,2}},?\s+\d{{4}}$", 0.9, re.I),
        ),
        synonyms=(
            "date",
            "dob",
            "birth_date",
            "date_of_birth",
            "birthdate",
            "hire_date",
            "start_date",
            "end_date",
        ),
    ),
    PatternMatcher(
        DataPattern.DATE_ISO,
        shapes=(
            _shape(
                r"^\d{4}-\d{2}-\d{2}([T ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?)?$",
                0.95,
            ),
        ),
        synonyms=("timestamp", "datetime", "created_at", "updated_at", "effective_date"),
    ),
    PatternMatcher(
        DataPattern.NAME_FULL,
        shapes=(
            _shape(r"^[A-Z][a-z]+,\s*[A-Z][a-z]+", 0.8),
            _shape(r"^[A-Z][a-z]+\s+([A-Z]\.?\s+)?[A-Z][a-z'-]+$", 0.8),
        ),
        synonyms=(
            "full_name",
            "fullname",
            "display_name",
            "patient_name",
            "provider_name",
            "staff_name",
            "employee_name",
        ),
    ),
    PatternMatcher(
        DataPattern.NAME_FIRST,
        shapes=(_shape(r"^[A-Z][a-z]{1,20}$", 0.7),),
        synonyms=(
            "first_name",
            "firstname",
            "fname",
            "first",
            "given_name",
            "given",
            "forename",
        ),
    ),
    PatternMatcher(
        DataPattern.NAME_LAST,
        shapes=(_shape(r"^[A-Z][a-zA-Z'-]{1,30}$", 0.6),),
        synonyms=(
            "last_name",
            "lastname",
            "lname",
            "last",
            "surname",
            "family_name",
            "family",
        ),
    ),
    PatternMatcher(
        DataPattern.STATE_CODE,
        shapes=(_shape(r"^[A-Z]{2}$", 0.8),),
        synonyms=("state", "state_code", "st", "province"),
    ),
    PatternMatcher(
        DataPattern.ZIP,
        shapes=(_shape(r"^\d{5}(-\d{4})?$", 0.8),),
        synonyms=("zip", "zip_code", "zipcode", "postal_code", "postal", "postcode"),
    ),
    PatternMatcher(
        DataPattern.CURRENCY,
        shapes=(
            _shape(r"^-?\$\d{1,3}(,\d{3})*(\.\d{2})?$", 0.9),
            _shape(r"^-?\$?\d{1,3}(,\d{3})+(\.\d{2})?$", 0.75),
            _shape(r"^-?\$?\d+\.\d{2}$", 0.75),
        ),
        synonyms=("amount", "price", "cost", "salary", "charge", "balance", "total"),
    ),
    PatternMatcher(
        DataPattern.PERCENTAGE,
        shapes=(_shape(r"^\d{1,3}(\.\d+)?%$", 0.9),),
        synonyms=("percent", "percentage", "pct"),
    ),
    PatternMatcher(
        DataPattern.BOOLEAN,
        shapes=(_shape(r"^(yes|no|true|false|1|0|y|n|t|f)$", 0.85, re.I),),
        synonyms=("active", "is_active", "enabled", "flag", "deleted", "is_deleted"),
    ),
    PatternMatcher(
        DataPattern.ID_NUMERIC,
        shapes=(_shape(r"^\d+$", 0.5),),
        synonyms=("id", "number", "num", "record_number", "row_id"),
    ),
    PatternMatcher(
        DataPattern.ID_UUID,
        shapes=(
            _shape(
                r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
                1.0,
                re.I,
            ),
        ),
        synonyms=("uuid", "guid"),
    ),
    PatternMatcher(
        DataPattern.ID_ALPHANUMERIC,
        shapes=(_shape(r"^[A-Z0-9]{4,20}$", 0.4, re.I),),
        synonyms=(
            "mrn",
            "emp_id",
            "employee_id",
            "staff_id",
            "badge",
            "badge_number",
            "license_number",
            "external_id",
        ),
    ),
    PatternMatcher(
        DataPattern.CODE,
        shapes=(_shape(r"^[A-Z_]{2,20}$", 0.45),),
        synonyms=("code", "status", "type", "category", "kind"),
    ),
    PatternMatcher(
        DataPattern.TEXT_SHORT,
        shapes=(_shape(r"^.{1,50}$", 0.2, re.S),),
        synonyms=("title", "label", "short_description"),
    ),
    PatternMatcher(
        DataPattern.TEXT_LONG,
        shapes=(_shape(r"^.{51,}$", 0.3, re.S),),
        synonyms=("notes", "note", "comments", "comment", "description", "remarks"),
    ),
    PatternMatcher(
        DataPattern.SNOMED_CT,
        shapes=(
            _shape(r"^\d{6,18}$", 0.4),
            _shape(r"^http://snomed\.info/sct\|\d+$", 1.0),
        ),
        synonyms=("snomed", "snomed_code", "snomed_ct", "sct_code"),
    ),
    PatternMatcher(
        DataPattern.LOINC,
        shapes=(
            _shape(r"^\d{1,5}-\d$", 0.9),
            _shape(r"^LP\d{5,7}-\d$", 0.9),
            _shape(r"^http://loinc\.org\|\d+-\d$", 1.0),
        ),
        synonyms=("loinc", "loinc_code", "lab_code", "observation_code"),
    ),
    PatternMatcher(
        DataPattern.RXNORM,
        shapes=(
            _shape(r"^\d{5,7}$", 0.35),
            _shape(r"^http://www\.nlm\.nih\.gov/research/umls/rxnorm\|\d+$", 1.0),
        ),
        synonyms=("rxnorm", "rxcui", "rx_norm", "medication_code"),
    ),
    PatternMatcher(
        DataPattern.ICD10,
        shapes=(
            _shape(r"^[A-TV-Z]\d{2}(\.\d{1,4})?$", 0.85),
            _shape(r"^[A-Z]\d{2}\.[0-9A-Z]{1,4}$", 0.85),
            _shape(r"^http://hl7\.org/fhir/sid/icd-10(-cm)?\|[A-Z]\d{2}", 1.0),
        ),
        synonyms=("icd10", "icd_10", "icd", "icd10_code", "diagnosis_code", "dx_code"),
    ),
    PatternMatcher(
        DataPattern.CPT,
        shapes=(
            _shape(r"^\d{5}$", 0.5),
            _shape(r"^http://www\.ama-assn\.org/go/cpt\|\d{5}$", 1.0),
        ),
        synonyms=("cpt", "cpt_code", "procedure_code", "hcpcs"),
    ),
    PatternMatcher(
        DataPattern.NDC,
        shapes=(
            _shape(r"^\d{4}-\d{4}-\d{2}$", 0.85),
            _shape(r"^\d{5}-\d{3}-\d{2}$", 0.85),
            _shape(r"^\d{5}-\d{4}-\d$", 0.85),
            _shape(r"^\d{11}$", 0.45),
        ),
        synonyms=("ndc", "ndc_code", "drug_code", "national_drug_code"),
    ),
    PatternMatcher(
        DataPattern.FHIR_RESOURCE_TYPE,
        shapes=(_shape(rf"^({_FHIR_RESOURCES})$", 0.95),),
        synonyms=("resource_type", "resourcetype", "fhir_type"),
    ),
    PatternMatcher(
        DataPattern.FHIR_REFERENCE,
        shapes=(
            _shape(
                r"^(Patient|Practitioner|Organization|Location|Encounter|"
                r"Observation|Condition|Procedure)/[A-Za-z0-9.-]+$",
                0.95,
            ),
            _shape(
                r"^urn:uuid:[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
                0.95,
                re.I,
            ),
        ),
        synonyms=("reference", "fhir_reference", "subject", "patient_reference"),
    ),
)


def ensure_complete(library: Mapping[DataPattern, PatternMatcher]) -> None:
    """Raise if a recognized pattern has no matcher or a matcher is misfiled."""
    missing = [p for p in DataPattern.recognized() if p not in library]
    if missing:
        names = ", ".join(sorted(missing))
        raise RuntimeError(f"DataPattern members without a matcher: {names}")
    for pattern, matcher in library.items():
        if matcher.pattern is not pattern:
            raise RuntimeError(
                f"Matcher for {matcher.pattern} registered under {pattern}"
            )
        if pattern is DataPattern.UNKNOWN:
            raise RuntimeError("UNKNOWN is the fallback and cannot be matched")


PATTERN_LIBRARY: dict[DataPattern, PatternMatcher] = {
    matcher.pattern: matcher for matcher in _MATCHERS
}
ensure_complete(PATTERN_LIBRARY)


def get_matcher(pattern: DataPattern) -> PatternMatcher:
    return PATTERN_LIBRARY[pattern]
