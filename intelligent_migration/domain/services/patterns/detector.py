"""Pattern detection for a single profiled column.

Two independent matchers propose (pattern, confidence) pairs:

* value shape: the share of valid sample values matching the pattern's
  shapes, weighted by how specific those shapes are;
* name token: the column name against the pattern's synonym list.

The same pattern proposed by both keeps the maximum. Ranking is by
confidence, then value evidence before name evidence, then pattern tag.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import re
from typing import TYPE_CHECKING

from rapidfuzz import fuzz

from ...entities.column_dna import PatternScore
from ...entities.data_pattern import DataPattern, EvidenceKind
from ...exceptions import MalformedSampleError
from ..naming import compact_name, contains_token_run, name_tokens, normalize_column_name
from .library import PATTERN_LIBRARY, PatternMatcher

if TYPE_CHECKING:
    from ...entities.column_dna import ColumnProfile

DEFAULT_PATTERN_FLOOR = 0.15
UNKNOWN_CONFIDENCE_CAP = 0.3

EXACT_SYNONYM_CONFIDENCE = 0.95
TOKEN_RUN_BASE = 0.55
TOKEN_RUN_COVERAGE_WEIGHT = 0.35
FUZZY_NAME_THRESHOLD = 0.88
FUZZY_NAME_WEIGHT = 0.8

_CONTROL_CHARS_RE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_EVIDENCE_RANK = {EvidenceKind.VALUE_SHAPE: 0, EvidenceKind.NAME_TOKEN: 1}


@dataclass(frozen=True, slots=True)
class PatternDetection:
    scores: tuple[PatternScore, ...]
    primary_pattern: DataPattern
    confidence: float
    malformed_count: int = 0

    @property
    def detected_patterns(self) -> tuple[DataPattern, ...]:
        return tuple(score.pattern for score in self.scores)

    @property
    def warnings(self) -> tuple[str, ...]:
        if not self.malformed_count:
            return ()
        return (f"{self.malformed_count} malformed sample value(s) excluded",)


def coerce_sample(value: object) -> str:
    """Return the text of a sample value usable as matcher evidence.

    Raises:
        MalformedSampleError: Binary content that is not UTF-8, or text
            carrying control characters
    """
    if isinstance(value, (bytes, bytearray)):
        try:
            text = bytes(value).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedSampleError(f"Non UTF-8 binary value: {exc}") from exc
    else:
        text = str(value)
    if _CONTROL_CHARS_RE.search(text):
        raise MalformedSampleError("Value contains control characters")
    return text.strip()


class PatternDetector:
    def __init__(
        self,
        *,
        floor: float = DEFAULT_PATTERN_FLOOR,
        library: Mapping[DataPattern, PatternMatcher] | None = None,
    ) -> None:
        super().__init__()
        if not 0.0 <= floor <= 1.0:
            raise ValueError(f"floor must be within [0, 1], got {floor}")
        self.floor = floor
        self.library = PATTERN_LIBRARY if library is None else library

    def detect(self, original_name: str, profile: ColumnProfile) -> PatternDetection:
        values, malformed = self._valid_values(profile.raw_values)
        proposals: dict[DataPattern, tuple[float, EvidenceKind]] = {}
        for pattern, confidence in self.match_values(values).items():
            _propose(proposals, pattern, confidence, EvidenceKind.VALUE_SHAPE)
        for pattern, confidence in self.match_name(original_name).items():
            _propose(proposals, pattern, confidence, EvidenceKind.NAME_TOKEN)

        ranked = sorted(
            proposals.items(),
            key=lambda item: (-item[1][0], _EVIDENCE_RANK[item[1][1]], item[0].value),
        )
        scores = tuple(
            PatternScore(pattern=pattern, confidence=confidence, evidence=evidence)
            for pattern, (confidence, evidence) in ranked
            if confidence >= self.floor and confidence > 0.0
        )
        if scores:
            return PatternDetection(
                scores=scores,
                primary_pattern=scores[0].pattern,
                confidence=scores[0].confidence,
                malformed_count=malformed,
            )
        best = ranked[0][1][0] if ranked else 0.0
        return PatternDetection(
            scores=(),
            primary_pattern=DataPattern.UNKNOWN,
            confidence=min(best, UNKNOWN_CONFIDENCE_CAP),
            malformed_count=malformed,
        )

    def match_values(self, values: tuple[str, ...]) -> dict[DataPattern, float]:
        if not values:
            return {}
        proposals: dict[DataPattern, float] = {}
        for pattern, matcher in self.library.items():
            total = sum(matcher.value_score(value) for value in values)
            if total > 0.0:
                proposals[pattern] = round(total / len(values), 4)
        return proposals

    def match_name(self, original_name: str) -> dict[DataPattern, float]:
        normalized = normalize_column_name(original_name)
        if not normalized:
            return {}
        tokens = name_tokens(normalized)
        compact = compact_name(normalized)
        proposals: dict[DataPattern, float] = {}
        for pattern, matcher in self.library.items():
            best = 0.0
            for synonym in matcher.synonyms:
                best = max(best, _synonym_score(normalized, tokens, compact, synonym))
            if best > 0.0:
                proposals[pattern] = round(best, 4)
        return proposals

    @staticmethod
    def _valid_values(raw_values: tuple[object, ...]) -> tuple[tuple[str, ...], int]:
        valid: list[str] = []
        malformed = 0
        for raw in raw_values:
            try:
                text = coerce_sample(raw)
            except MalformedSampleError:
                malformed += 1
                continue
            if text:
                valid.append(text)
        return tuple(valid), malformed


def _synonym_score(
    normalized: str, tokens: tuple[str, ...], compact: str, synonym: str
) -> float:
    if normalized == synonym or compact == synonym.replace("_", ""):
        return EXACT_SYNONYM_CONFIDENCE
    synonym_tokens = tuple(synonym.split("_"))
    if contains_token_run(tokens, synonym_tokens):
        coverage = len(synonym_tokens) / len(tokens)
        return TOKEN_RUN_BASE + TOKEN_RUN_COVERAGE_WEIGHT * coverage
    ratio = fuzz.ratio(compact, synonym.replace("_", "")) / 100.0
    if ratio >= FUZZY_NAME_THRESHOLD:
        return FUZZY_NAME_WEIGHT * ratio
    return 0.0


def _propose(
    proposals: dict[DataPattern, tuple[float, EvidenceKind]],
    pattern: DataPattern,
    confidence: float,
    evidence: EvidenceKind,
) -> None:
    current = proposals.get(pattern)
    if current is None or confidence > current[0]:
        proposals[pattern] = (min(confidence, 1.0), evidence)
