"""
Evaluation module for retrieval quality measurement.

Contains:
- models/: Result data classes
- evaluators/: Metrics calculator and retrieval evaluator
- data/: Evaluation case loading

IMPORTANT: This module is for development/benchmarking only.

Usage:
    from knowledge_rag.evaluation import RetrievalEvaluator, RetrievalEvalDataset

    dataset = RetrievalEvalDataset.from_json("retrieval_eval_cases.json")
    report = await RetrievalEvaluator(retriever).evaluate(dataset.cases, org_id="org-1")
"""

from knowledge_rag.evaluation.data import RetrievalEvalCase, RetrievalEvalDataset
from knowledge_rag.evaluation.evaluators import MetricsCalculator, RetrievalEvaluator
from knowledge_rag.evaluation.models import CaseResult, RetrievalEvalReport

__all__ = [
    "CaseResult",
    "MetricsCalculator",
    "RetrievalEvalCase",
    "RetrievalEvalDataset",
    "RetrievalEvalReport",
    "RetrievalEvaluator",
]
