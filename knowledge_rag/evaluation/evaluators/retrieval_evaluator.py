"""
Hybrid retrieval evaluator.

Runs each evaluation case through the HybridRetriever and scores the ranked
chunk texts against the case's expected keywords.

IMPORTANT: Development-only code. Not for production.
"""

import logging
import re

from knowledge_rag.core.retrieval.hybrid_retriever import HybridRetriever
from knowledge_rag.evaluation.data.datasets import RetrievalEvalCase
from knowledge_rag.evaluation.evaluators.metrics_calculator import MetricsCalculator
from knowledge_rag.evaluation.models.result_models import CaseResult, RetrievalEvalReport

logger = logging.getLogger(__name__)

EVAL_SIMILARITY_THRESHOLD = 0.35
PREVIEW_CHARS = 120


class RetrievalEvaluator:
    """Recall@k and MRR over keyword-labelled retrieval cases."""

    def __init__(
        self,
        retriever: HybridRetriever,
        similarity_threshold: float = EVAL_SIMILARITY_THRESHOLD,
    ) -> None:
        self._retriever = retriever
        self._similarity_threshold = similarity_threshold

    async def evaluate(
        self,
        cases: list[RetrievalEvalCase],
        org_id: str,
        top_k: int = 8,
    ) -> RetrievalEvalReport:
        """
        Evaluate retrieval quality.

        Args:
            cases: Evaluation cases
            org_id: Organization owning the cases' topics
            top_k: Results retrieved per case

        Returns:
            RetrievalEvalReport: recall_at_k, mrr and per-case detail
        """
        detailed: list[CaseResult] = []
        for case in cases:
            results = await self._retriever.retrieve(
                case.query,
                org_id,
                [case.topic_id],
                top_k=top_k,
                similarity_threshold=self._similarity_threshold,
            )
            texts = [r.chunk_text for r in results]
            rank = MetricsCalculator.first_hit_rank(texts, case.expected_keywords)
            preview = re.sub(r"\s+", " ", texts[0])[:PREVIEW_CHARS] if texts else None
            detailed.append(
                CaseResult(
                    query=case.query,
                    topic_id=case.topic_id,
                    hit=rank is not None,
                    first_hit_rank=rank,
                    top_preview=preview,
                )
            )

        ranks = [case.first_hit_rank for case in detailed]
        report = RetrievalEvalReport(
            cases=len(cases),
            top_k=top_k,
            recall_at_k=MetricsCalculator.recall_at_k(ranks, top_k),
            mrr=MetricsCalculator.mean_reciprocal_rank(ranks),
            detailed=detailed,
        )
        logger.info(
            f"{__name__}:evaluate - {report.cases} cases, recall@{top_k}={report.recall_at_k:.3f}, mrr={report.mrr:.3f}"
        )
        return report
