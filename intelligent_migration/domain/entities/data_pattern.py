from __future__ import annotations

from enum import StrEnum


class DataPattern(StrEnum):
    NPI = "NPI"
    SSN = "SSN"
    PHONE = "PHONE"
    EMAIL = "EMAIL"
    DATE = "DATE"
    DATE_ISO = "DATE_ISO"
    NAME_FULL = "NAME_FULL"
    NAME_FIRST = "NAME_FIRST"
    NAME_LAST = "NAME_LAST"
    STATE_CODE = "STATE_CODE"
    ZIP = "ZIP"
    CURRENCY = "CURRENCY"
    PERCENTAGE = "PERCENTAGE"
    BOOLEAN = "BOOLEAN"
    ID_NUMERIC = "ID_NUMERIC"
    ID_UUID = "ID_UUID"
    ID_ALPHANUMERIC = "ID_ALPHANUMERIC"
    CODE = "CODE"
    TEXT_SHORT = "TEXT_SHORT"
    TEXT_LONG = "TEXT_LONG"
    SNOMED_CT = "SNOMED_CT"
    LOINC = "LOINC"
    RXNORM = "RXNORM"
    ICD10 = "ICD10"
    CPT = "CPT"
    NDC = "NDC"
    FHIR_RESOURCE_TYPE = "FHIR_RESOURCE_TYPE"
    FHIR_REFERENCE = "FHIR_REFERENCE"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def recognized(cls) -> tuple[DataPattern, ...]:
        return tuple(p for p in cls if p is not cls.UNKNOWN)


class EvidenceKind(StrEnum):
    VALUE_SHAPE = "value_shape"
    NAME_TOKEN = "name_token"


class DataType(StrEnum):
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATE = "date"
    UNKNOWN = "unknown"
