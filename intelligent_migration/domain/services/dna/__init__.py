"""Source fingerprinting services."""

from .extractor import (
    DEFAULT_MAX_WORKERS,
    EMPTY_SOURCE_WARNING,
    SINGLE_ROW_WARNING,
    SourceDNAExtractor,
)
from .signature import SIGNATURE_LAYOUT, SIGNATURE_LENGTH, signature_vector, structure_hash
from .source_system import detect_source_system

__all__ = [
    "DEFAULT_MAX_WORKERS",
    "EMPTY_SOURCE_WARNING",
    "SIGNATURE_LAYOUT",
    "SIGNATURE_LENGTH",
    "SINGLE_ROW_WARNING",
    "SourceDNAExtractor",
    "detect_source_system",
    "signature_vector",
    "structure_hash",
]
