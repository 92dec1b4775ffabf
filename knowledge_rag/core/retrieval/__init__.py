"""Hybrid retrieval, rank fusion and cross-topic merging."""

from knowledge_rag.core.retrieval.cross_topic import CrossTopicMerger
from knowledge_rag.core.retrieval.fusion import fuse_rows, ranking_key, rrf_score
from knowledge_rag.core.retrieval.hybrid_retriever import HybridRetriever, validate_scope

__all__ = [
    "CrossTopicMerger",
    "HybridRetriever",
    "fuse_rows",
    "ranking_key",
    "rrf_score",
    "validate_scope",
]
