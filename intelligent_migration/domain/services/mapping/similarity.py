from __future__ import annotations

from dataclasses import dataclass

from rapidfuzz.distance import Levenshtein

from ...entities.target_schema import TargetSchema
from ..naming import compact_name, name_tokens

DEFAULT_NAME_THRESHOLD = 0.5
SYNONYM_DISCOUNT = 0.95
TOKEN_SUBSET_BASE = 0.75
SUBSTRING_BASE = 0.7
PARTIAL_MATCH_WEIGHT = 0.2
MIN_SUBSTRING_LENGTH = 3


@dataclass(frozen=True, slots=True)
class NameMatch:
    score: float
    matched: str
    via_synonym: bool = False


def name_similarity(left: str, right: str) -> float:
    """Similarity of two column names in [0, 1].

    Identical compact spellings score 1.0. A name whose tokens are all part
    of the other scores from 0.75 up, then a plain substring from 0.7 up;
    anything else falls back to normalized Levenshtein similarity.
    """
    left_tokens, right_tokens = name_tokens(left), name_tokens(right)
    left_compact, right_compact = compact_name(left), compact_name(right)
    if not left_compact or not right_compact:
        return 0.0
    if left_compact == right_compact:
        return 1.0

    short, long = sorted((left_tokens, right_tokens), key=len)
    if set(short) <= set(long):
        return TOKEN_SUBSET_BASE + PARTIAL_MATCH_WEIGHT * len(short) / len(long)

    short_compact, long_compact = sorted((left_compact, right_compact), key=len)
    if len(short_compact) >= MIN_SUBSTRING_LENGTH and short_compact in long_compact:
        ratio = len(short_compact) / len(long_compact)
        return SUBSTRING_BASE + PARTIAL_MATCH_WEIGHT * ratio

    return Levenshtein.normalized_similarity(left_compact, right_compact)


def field_name_match(
    normalized_name: str,
    column: str,
    schema: TargetSchema,
    *,
    threshold: float = DEFAULT_NAME_THRESHOLD,
) -> NameMatch:
    """Best match of a source name against a target column and its synonyms.

    Synonym matches are discounted; scores under ``threshold`` become 0.
    """
    best = NameMatch(score=name_similarity(normalized_name, column), matched=column)
    for synonym in schema.synonyms_for(column):
        score = SYNONYM_DISCOUNT * name_similarity(normalized_name, synonym)
        if score > best.score:
            best = NameMatch(score=score, matched=synonym, via_synonym=True)
    if best.score < threshold:
        return NameMatch(score=0.0, matched=best.matched, via_synonym=best.via_synonym)
    return best
