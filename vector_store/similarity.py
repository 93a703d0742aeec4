"""
Similarity Engine - cosine scoring and exact top-K ranking

The baseline engine scores the query against every record (full scan, no
index), sorts by score descending with ties kept in insertion order, and
truncates to K. Cost is O(N*D + N log N) per query, which is fine for
corpora of a few thousand chunks. Other engines (e.g. approximate
indexes) can be plugged in behind the SimilarityEngine protocol as long as
they honour the same ranking contract.
"""

from typing import Protocol, Sequence

import numpy as np

from common.exceptions import DimensionMismatchError

from .models import EmbeddedChunk, RankedResult


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors.

    Raises:
        DimensionMismatchError: If the vectors differ in length.

    Returns:
        dot(a, b) / (|a| * |b|), or exactly 0.0 if either vector has zero norm.
    """
    if len(a) != len(b):
        raise DimensionMismatchError(len(a), len(b))

    vec_a = np.asarray(a, dtype=np.float64)
    vec_b = np.asarray(b, dtype=np.float64)

    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.dot(vec_a, vec_b) / (norm_a * norm_b))


def score_all(query_vector: Sequence[float], vectors: np.ndarray) -> np.ndarray:
    """
    Cosine similarity of ``query_vector`` against every row of ``vectors``.

    Rows with zero norm (and everything, for a zero query) score 0.0.
    """
    query = np.asarray(query_vector, dtype=np.float64)
    if vectors.ndim != 2 or vectors.shape[1] != query.shape[0]:
        store_dimension = vectors.shape[1] if vectors.ndim == 2 else 0
        raise DimensionMismatchError(store_dimension, query.shape[0], "query vs. store")

    query_norm = np.linalg.norm(query)
    if query_norm == 0:
        return np.zeros(vectors.shape[0], dtype=np.float64)

    row_norms = np.linalg.norm(vectors, axis=1)
    dots = vectors @ query
    scores = np.zeros(vectors.shape[0], dtype=np.float64)
    nonzero = row_norms > 0
    scores[nonzero] = dots[nonzero] / (row_norms[nonzero] * query_norm)
    return scores


class SimilarityEngine(Protocol):
    """Ranking contract shared by all engines."""

    def rank(
        self,
        query_vector: Sequence[float],
        records: Sequence[EmbeddedChunk],
        top_k: int,
    ) -> list[RankedResult]:
        ...


class BruteForceSimilarityEngine:
    """Exact full-scan engine."""

    def rank(
        self,
        query_vector: Sequence[float],
        records: Sequence[EmbeddedChunk],
        top_k: int,
    ) -> list[RankedResult]:
        """
        Rank ``records`` against ``query_vector``.

        Returns:
            ``min(top_k, len(records))`` results, score descending; exact
            ties keep insertion order.
        """
        if top_k < 1:
            raise ValueError(f"top_k must be >= 1, got {top_k}")
        if not records:
            return []

        matrix = np.asarray([r.vector for r in records], dtype=np.float64)
        scores = score_all(query_vector, matrix)

        # Stable sort on the negated scores keeps insertion order for ties.
        order = np.argsort(-scores, kind="stable")[:top_k]
        return [
            RankedResult(record=records[i], score=float(scores[i]), rank=rank)
            for rank, i in enumerate(order.tolist(), start=1)
        ]
