from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from ...entities.history import HistoricalMigrationRecord, SimilarMigration

SIMILARITY_PRECISION = 6


def cosine_similarity(left: Sequence[float], right: Sequence[float]) -> float:
    """Cosine similarity clamped to [0, 1].

    Vectors of different length, or with zero magnitude, score 0.
    """
    if len(left) != len(right) or not left:
        return 0.0
    a = np.asarray(left, dtype=float)
    b = np.asarray(right, dtype=float)
    norm = float(np.linalg.norm(a) * np.linalg.norm(b))
    if norm == 0.0:
        return 0.0
    value = float(np.dot(a, b)) / norm
    return round(min(max(value, 0.0), 1.0), SIMILARITY_PRECISION)


def rank_records(
    records: Iterable[HistoricalMigrationRecord],
    vector: Sequence[float],
    k: int,
) -> list[SimilarMigration]:
    """Return the ``k`` records closest to ``vector``.

    Equal similarities are ordered most recent first, then by ``dna_id``.
    """
    if k <= 0:
        return []
    scored = [
        SimilarMigration(
            record=record,
            similarity=cosine_similarity(record.signature_vector, vector),
        )
        for record in records
    ]
    scored.sort(key=lambda match: match.record.dna_id)
    scored.sort(key=lambda match: match.record.timestamp, reverse=True)
    scored.sort(key=lambda match: match.similarity, reverse=True)
    return scored[:k]
