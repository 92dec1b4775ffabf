"""
Test suite for reciprocal rank fusion and result ordering.

System role: Verification of hybrid retrieval ranking math
"""

import pytest

from knowledge_rag.core.retrieval.fusion import fuse_rows, ranking_key, rrf_score
from knowledge_rag.models.retrieval import RetrievalResult


class TestRRFScore:
    """Test suite for rrf_score()."""

    def test_rrf_score_should_sum_both_terms(self) -> None:
        """Test a chunk in both lists gets both reciprocal terms."""
        assert rrf_score(1, 3, k=60) == pytest.approx(1 / 61 + 1 / 63)

    def test_rrf_score_should_use_single_term_when_one_rank_missing(self) -> None:
        """Test a chunk absent from one list contributes only the other term."""
        assert rrf_score(2, None, k=60) == pytest.approx(1 / 62)
        assert rrf_score(None, 5, k=60) == pytest.approx(1 / 65)

    def test_rrf_score_should_apply_weights(self) -> None:
        """Test vector and lexical weights scale their terms."""
        score = rrf_score(1, 1, k=10, vector_weight=2.0, lexical_weight=0.5)

        assert score == pytest.approx(2.0 / 11 + 0.5 / 11)

    def test_rrf_score_should_be_zero_without_ranks(self) -> None:
        """Test no ranks yields zero."""
        assert rrf_score(None, None) == 0.0


class TestRankingKey:
    """Test suite for ranking_key() tie-breaking."""

    @staticmethod
    def _result(chunk_id: str, fused: float, vector_rank=None, lexical_rank=None) -> RetrievalResult:
        return RetrievalResult(
            chunk_id=chunk_id,
            document_id="doc",
            topic_id="topic-a",
            chunk_text="text",
            similarity=0.8,
            fused_score=fused,
            vector_rank=vector_rank,
            lexical_rank=lexical_rank,
        )

    def test_ranking_key_should_break_ties_by_vector_rank_then_chunk_id(self) -> None:
        """Test equal fused scores fall back to vector rank, missing ranks last, then chunk id."""
        # Arrange
        results = [
            self._result("c", 0.5, vector_rank=None, lexical_rank=1),
            self._result("b", 0.5, vector_rank=2),
            self._result("a", 0.5, vector_rank=2),
            self._result("d", 0.9, vector_rank=9),
        ]

        # Act
        ordered = sorted(results, key=ranking_key)

        # Assert
        assert [r.chunk_id for r in ordered] == ["d", "a", "b", "c"]


class TestFuseRows:
    """Test suite for fuse_rows()."""

    def test_fuse_rows_should_drop_rows_below_similarity_floor(self, make_row) -> None:
        """Test the floor applies to every candidate, lexical-only ones included."""
        # Arrange
        rows = [
            make_row("strong", 0.9, vector_rank=1),
            make_row("weak-lexical", 0.2, lexical_rank=1),
        ]

        # Act
        results = fuse_rows(rows, similarity_threshold=0.35)

        # Assert
        assert [r.chunk_id for r in results] == ["strong"]

    def test_fuse_rows_should_keep_row_exactly_at_threshold(self, make_row) -> None:
        """Test similarity equal to the threshold passes."""
        results = fuse_rows([make_row("edge", 0.5, vector_rank=1)], similarity_threshold=0.5)

        assert len(results) == 1

    def test_fuse_rows_should_rank_hybrid_match_above_single_list_match(self, make_row) -> None:
        """Test a chunk found by both searches outranks one found by a single search."""
        # Arrange
        rows = [
            make_row("vector-only", 0.95, vector_rank=1),
            make_row("both", 0.7, vector_rank=2, lexical_rank=1),
        ]

        # Act
        results = fuse_rows(rows, similarity_threshold=0.0)

        # Assert
        assert [r.chunk_id for r in results] == ["both", "vector-only"]
        assert results[0].fused_score == pytest.approx(1 / 62 + 1 / 61)

    def test_fuse_rows_should_merge_duplicate_chunk_ids(self, make_row) -> None:
        """Test duplicate rows collapse to one result keeping the best ranks."""
        # Arrange
        rows = [
            make_row("dup", 0.8, vector_rank=3),
            make_row("dup", 0.8, lexical_rank=2),
        ]

        # Act
        results = fuse_rows(rows, similarity_threshold=0.0)

        # Assert
        assert len(results) == 1
        assert results[0].vector_rank == 3
        assert results[0].lexical_rank == 2

    def test_fuse_rows_should_return_empty_for_no_rows(self) -> None:
        """Test empty input yields empty output."""
        assert fuse_rows([], similarity_threshold=0.5) == []

    def test_fuse_rows_should_be_deterministic(self, make_row) -> None:
        """Test shuffled input yields the same order."""
        # Arrange
        rows = [make_row(f"c{i}", 0.6, vector_rank=1) for i in range(5)]

        # Act
        forward = fuse_rows(rows, similarity_threshold=0.5)
        backward = fuse_rows(list(reversed(rows)), similarity_threshold=0.5)

        # Assert
        assert [r.chunk_id for r in forward] == [r.chunk_id for r in backward]
        assert [r.chunk_id for r in forward] == ["c0", "c1", "c2", "c3", "c4"]
