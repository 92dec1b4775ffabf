"""
Evaluation models - Data classes for retrieval evaluation results.
"""

from knowledge_rag.evaluation.models.result_models import CaseResult, RetrievalEvalReport

__all__ = ["CaseResult", "RetrievalEvalReport"]
