"""
Test suite for retrieval evaluation.

Tests MetricsCalculator, case loading and RetrievalEvaluator against a
mocked retriever.

System role: Verification of retrieval quality reporting
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from knowledge_rag.core.exceptions import InvalidQueryError
from knowledge_rag.evaluation import (
    MetricsCalculator,
    RetrievalEvalCase,
    RetrievalEvalDataset,
    RetrievalEvaluator,
)
from knowledge_rag.models.retrieval import RetrievalResult


def result(text: str) -> RetrievalResult:
    return RetrievalResult(
        chunk_id=text[:8],
        document_id="doc",
        topic_id="topic-a",
        chunk_text=text,
        similarity=0.8,
    )


class TestMetricsCalculator:
    """Test suite for MetricsCalculator."""

    def test_first_hit_rank_should_be_case_insensitive(self) -> None:
        """Test keyword matching ignores case and returns a 1-based rank."""
        texts = ["Parking rules", "Refunds are issued in 14 days"]

        assert MetricsCalculator.first_hit_rank(texts, ["REFUND"]) == 2

    def test_first_hit_rank_should_be_none_without_match(self) -> None:
        """Test no matching text yields None."""
        assert MetricsCalculator.first_hit_rank(["abc"], ["xyz"]) is None

    def test_recall_at_k_should_count_hits_within_k(self) -> None:
        """Test recall counts queries whose first hit is within k."""
        assert MetricsCalculator.recall_at_k([1, 3, None, 9], k=3) == pytest.approx(0.5)

    def test_mrr_should_average_reciprocal_ranks(self) -> None:
        """Test misses contribute zero to MRR."""
        assert MetricsCalculator.mean_reciprocal_rank([1, 2, None, 4]) == pytest.approx((1 + 0.5 + 0.25) / 4)

    def test_metrics_should_be_zero_for_no_queries(self) -> None:
        """Test empty input yields zero scores."""
        assert MetricsCalculator.recall_at_k([], k=5) == 0.0
        assert MetricsCalculator.mean_reciprocal_rank([]) == 0.0


class TestRetrievalEvalDataset:
    """Test suite for evaluation case loading."""

    def test_from_json_should_load_cases(self, tmp_path) -> None:
        """Test a JSON list becomes evaluation cases."""
        # Arrange
        path = tmp_path / "cases.json"
        path.write_text(json.dumps([
            {"topic_id": "topic-a", "query": "refund window", "expected_keywords": ["14 days"]},
        ]))

        # Act
        dataset = RetrievalEvalDataset.from_json(path)

        # Assert
        assert len(dataset) == 1
        assert dataset.cases[0].expected_keywords == ["14 days"]

    def test_from_json_should_reject_empty_file(self, tmp_path) -> None:
        """Test an empty case list raises InvalidQueryError."""
        path = tmp_path / "cases.json"
        path.write_text("[]")

        with pytest.raises(InvalidQueryError):
            RetrievalEvalDataset.from_json(path)

    def test_case_should_require_keywords(self) -> None:
        """Test a case without expected keywords is invalid."""
        with pytest.raises(InvalidQueryError):
            RetrievalEvalCase.from_dict({"topic_id": "topic-a", "query": "q", "expected_keywords": []})


class TestRetrievalEvaluator:
    """Test suite for RetrievalEvaluator.evaluate()."""

    @pytest.mark.asyncio
    async def test_evaluate_should_report_recall_and_mrr(self) -> None:
        """Test per-case hits roll up into recall@k and MRR."""
        # Arrange
        retriever = MagicMock()
        retriever.retrieve = AsyncMock(side_effect=[
            [result("Refunds are issued within 14 days"), result("Other")],
            [result("Parking permits"), result("Remote work needs approval")],
            [result("Unrelated")],
        ])
        cases = [
            RetrievalEvalCase("topic-a", "refund window", ["14 days"]),
            RetrievalEvalCase("topic-a", "remote work", ["approval"]),
            RetrievalEvalCase("topic-b", "dress code", ["business casual"]),
        ]

        # Act
        report = await RetrievalEvaluator(retriever).evaluate(cases, org_id="org-1", top_k=8)

        # Assert
        assert report.cases == 3
        assert report.recall_at_k == pytest.approx(2 / 3)
        assert report.mrr == pytest.approx((1 + 0.5) / 3)
        assert [c.first_hit_rank for c in report.detailed] == [1, 2, None]
        assert report.detailed[2].hit is False
        assert report.detailed[0].top_preview == "Refunds are issued within 14 days"

    @pytest.mark.asyncio
    async def test_evaluate_should_query_each_case_topic_with_eval_threshold(self) -> None:
        """Test the retriever is called per case with its topic, org, top_k and 0.35 floor."""
        # Arrange
        retriever = MagicMock()
        retriever.retrieve = AsyncMock(return_value=[])
        cases = [RetrievalEvalCase("topic-b", "dress code", ["casual"])]

        # Act
        report = await RetrievalEvaluator(retriever).evaluate(cases, org_id="org-9", top_k=4)

        # Assert
        retriever.retrieve.assert_awaited_once_with(
            "dress code", "org-9", ["topic-b"], top_k=4, similarity_threshold=0.35
        )
        assert report.to_dict()["detailed"][0]["top_preview"] is None
