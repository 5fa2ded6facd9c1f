"""Unit tests for cosine similarity and top-K ranking."""

from __future__ import annotations

import math

import pytest

from conftest import make_chunk
from lectro.utils.similarity import cosine_similarity, rank_chunks


class TestCosineSimilarity:
    def test_identical_vectors_score_one(self) -> None:
        assert cosine_similarity([0.3, 0.4, 0.5], [0.3, 0.4, 0.5]) == pytest.approx(1.0)

    def test_orthogonal_vectors_score_zero(self) -> None:
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_opposite_vectors_score_minus_one(self) -> None:
        assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(-1.0)

    def test_scale_invariant(self) -> None:
        assert cosine_similarity([1.0, 1.0], [10.0, 10.0]) == pytest.approx(1.0)

    def test_zero_vector_is_nan(self) -> None:
        assert math.isnan(cosine_similarity([0.0, 0.0], [1.0, 0.0]))

    def test_length_mismatch_is_nan(self) -> None:
        assert math.isnan(cosine_similarity([1.0, 0.0, 0.0], [1.0, 0.0]))


class TestRankChunks:
    def test_sorted_descending_and_truncated(self) -> None:
        chunks = [
            make_chunk("low", "b1", [0.0, 1.0]),
            make_chunk("high", "b2", [1.0, 0.0]),
            make_chunk("mid", "b3", [1.0, 1.0]),
        ]
        hits, mismatched = rank_chunks(chunks, [1.0, 0.0], 2)
        assert [hit.book_id for hit in hits] == ["b2", "b3"]
        assert mismatched == 0

    def test_nan_scores_rank_after_negative_scores(self) -> None:
        chunks = [
            make_chunk("zero", "b0", [0.0, 0.0]),
            make_chunk("neg", "b1", [-1.0, 0.0]),
        ]
        hits, _ = rank_chunks(chunks, [1.0, 0.0], 10)
        assert hits[0].book_id == "b1"
        assert hits[0].score == pytest.approx(-1.0)
        assert math.isnan(hits[1].score)

    def test_ties_keep_store_order(self) -> None:
        chunks = [make_chunk(str(i), f"b{i}", [1.0, 0.0]) for i in range(5)]
        hits, _ = rank_chunks(chunks, [2.0, 0.0], 5)
        assert [hit.book_id for hit in hits] == ["b0", "b1", "b2", "b3", "b4"]

    def test_counts_dimension_mismatches(self) -> None:
        chunks = [
            make_chunk("a", "b1", [1.0, 0.0, 0.0]),
            make_chunk("b", "b2", [1.0, 0.0]),
        ]
        hits, mismatched = rank_chunks(chunks, [1.0, 0.0], 10)
        assert mismatched == 1
        assert hits[0].book_id == "b2"

    def test_limit_larger_than_store(self) -> None:
        hits, _ = rank_chunks([make_chunk("a", "b1", [1.0])], [1.0], 20)
        assert len(hits) == 1

    def test_hit_carries_text_and_chapter(self) -> None:
        chunk = make_chunk("a", "b1", [1.0], "Whales.", chapterTitle="Cetology")
        hits, _ = rank_chunks([chunk], [1.0], 1)
        assert hits[0].text == "Whales."
        assert hits[0].chapter_title == "Cetology"
