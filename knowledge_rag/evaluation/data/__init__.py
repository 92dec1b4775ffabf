"""
Data management - Retrieval evaluation cases and loading.
"""

from knowledge_rag.evaluation.data.datasets import RetrievalEvalCase, RetrievalEvalDataset

__all__ = ["RetrievalEvalCase", "RetrievalEvalDataset"]
