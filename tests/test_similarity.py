"""Tests for vector_store.similarity: cosine scoring and exact ranking."""

import numpy as np
import pytest

from common.exceptions import DimensionMismatchError
from vector_store.similarity import BruteForceSimilarityEngine, cosine_similarity, score_all

from conftest import make_record, unit_vector


class TestCosineSimilarity:
    def test_symmetric(self):
        a, b = [0.3, -1.2, 2.0], [1.5, 0.2, -0.7]
        assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))

    def test_self_similarity_is_one(self):
        v = [0.3, -1.2, 2.0]
        assert cosine_similarity(v, v) == pytest.approx(1.0)

    def test_orthogonal(self):
        assert cosine_similarity([1, 0], [0, 1]) == pytest.approx(0.0)

    def test_opposite(self):
        assert cosine_similarity([1, 2], [-1, -2]) == pytest.approx(-1.0)

    def test_zero_vector_scores_zero(self):
        assert cosine_similarity([0, 0, 0], [1, 2, 3]) == 0.0
        assert cosine_similarity([1, 2, 3], [0, 0, 0]) == 0.0

    def test_length_mismatch_raises(self):
        with pytest.raises(DimensionMismatchError):
            cosine_similarity([1, 2, 3], [1, 2])

    def test_scale_invariant(self):
        assert cosine_similarity([1, 2], [10, 20]) == pytest.approx(1.0)


class TestScoreAll:
    def test_matches_pairwise(self):
        vectors = np.array([[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
        scores = score_all([1.0, 0.0], vectors)
        expected = [cosine_similarity([1.0, 0.0], row) for row in vectors.tolist()]
        assert scores.tolist() == pytest.approx(expected)

    def test_zero_rows_and_zero_query(self):
        vectors = np.array([[0.0, 0.0], [3.0, 4.0]])
        assert score_all([1.0, 0.0], vectors).tolist() == pytest.approx([0.0, 0.6])
        assert score_all([0.0, 0.0], vectors).tolist() == [0.0, 0.0]

    def test_dimension_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            score_all([1.0, 0.0, 0.0], np.array([[1.0, 0.0]]))


class TestBruteForceRanking:
    def _records(self, cosines):
        return [make_record(f"Record {i} text.", unit_vector(c), sequence_index=i) for i, c in enumerate(cosines)]

    def test_ties_keep_insertion_order(self):
        records = self._records([0.4, 0.9, 0.9])
        results = BruteForceSimilarityEngine().rank([1.0, 0.0], records, top_k=2)

        assert [r.record for r in results] == [records[1], records[2]]
        assert [r.score for r in results] == pytest.approx([0.9, 0.9])
        assert [r.rank for r in results] == [1, 2]

    def test_leading_ties_keep_insertion_order(self):
        records = self._records([0.9, 0.9, 0.4])
        results = BruteForceSimilarityEngine().rank([1.0, 0.0], records, top_k=2)

        assert [r.record.record_id for r in results] == [records[0].record_id, records[1].record_id]
        assert [r.score for r in results] == pytest.approx([0.9, 0.9])

    def test_sorted_descending(self):
        records = self._records([0.1, 0.7, 0.3, 0.95, 0.5])
        results = BruteForceSimilarityEngine().rank([1.0, 0.0], records, top_k=5)
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)
        assert results[0].record == records[3]

    def test_returns_min_k_n(self):
        records = self._records([0.1, 0.2, 0.3])
        assert len(BruteForceSimilarityEngine().rank([1.0, 0.0], records, top_k=10)) == 3
        assert len(BruteForceSimilarityEngine().rank([1.0, 0.0], records, top_k=1)) == 1

    def test_empty_records(self):
        assert BruteForceSimilarityEngine().rank([1.0, 0.0], [], top_k=3) == []

    def test_invalid_k(self):
        with pytest.raises(ValueError):
            BruteForceSimilarityEngine().rank([1.0, 0.0], self._records([0.5]), top_k=0)

    def test_confidence(self):
        results = BruteForceSimilarityEngine().rank([1.0, 0.0], self._records([0.874]), top_k=1)
        assert results[0].confidence == 87
