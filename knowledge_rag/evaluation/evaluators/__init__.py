"""
Evaluation logic - Retrieval metrics and the hybrid retrieval evaluator.
"""

from knowledge_rag.evaluation.evaluators.metrics_calculator import MetricsCalculator
from knowledge_rag.evaluation.evaluators.retrieval_evaluator import RetrievalEvaluator

__all__ = ["MetricsCalculator", "RetrievalEvaluator"]
