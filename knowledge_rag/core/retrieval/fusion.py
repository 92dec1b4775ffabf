"""
Reciprocal rank fusion and result ordering.

fused = w_v / (k + vector_rank) + w_f / (k + lexical_rank), where a chunk
absent from one candidate list contributes only the other term.

Dependencies: knowledge_rag.models.retrieval, knowledge_rag.boundary.chunk_store
System role: Ranking math for hybrid retrieval
"""

import math

from knowledge_rag.boundary.chunk_store.chunk_schemas import HybridSearchRow
from knowledge_rag.models.retrieval import RetrievalResult

DEFAULT_RRF_K = 60


def rrf_score(
    vector_rank: int | None,
    lexical_rank: int | None,
    k: int = DEFAULT_RRF_K,
    vector_weight: float = 1.0,
    lexical_weight: float = 1.0,
) -> float:
    """Weighted reciprocal rank fusion score for one chunk."""
    score = 0.0
    if vector_rank is not None:
        score += vector_weight / (k + vector_rank)
    if lexical_rank is not None:
        score += lexical_weight / (k + lexical_rank)
    return score


def _rank_or_last(rank: int | None) -> float:
    return rank if rank is not None else math.inf


def ranking_key(result: RetrievalResult) -> tuple:
    """Total order: fused desc, vector rank asc (missing last), lexical rank asc, chunk id."""
    return (
        -result.fused_score,
        _rank_or_last(result.vector_rank),
        _rank_or_last(result.lexical_rank),
        result.chunk_id,
    )


def _merge_rank(a: int | None, b: int | None) -> int | None:
    if a is None:
        return b
    if b is None:
        return a
    return min(a, b)


def fuse_rows(
    rows: list[HybridSearchRow],
    similarity_threshold: float,
    k: int = DEFAULT_RRF_K,
    vector_weight: float = 1.0,
    lexical_weight: float = 1.0,
) -> list[RetrievalResult]:
    """
    Union candidate rows by chunk id, drop rows under the similarity floor,
    score them with RRF and return them in ranking order.

    Args:
        rows: Candidate rows from one or more store searches
        similarity_threshold: Minimum cosine similarity for any candidate
        k: RRF smoothing constant
        vector_weight: Weight of the vector rank term
        lexical_weight: Weight of the lexical rank term

    Returns:
        list[RetrievalResult]: Fused results sorted by ranking_key
    """
    merged: dict[str, HybridSearchRow] = {}
    for row in rows:
        if row.similarity < similarity_threshold:
            continue
        existing = merged.get(row.chunk_id)
        if existing is None:
            merged[row.chunk_id] = row
            continue
        merged[row.chunk_id] = existing.model_copy(
            update={
                "vector_rank": _merge_rank(existing.vector_rank, row.vector_rank),
                "lexical_rank": _merge_rank(existing.lexical_rank, row.lexical_rank),
                "text_rank": max(existing.text_rank, row.text_rank),
            }
        )

    results = [
        RetrievalResult(
            chunk_id=row.chunk_id,
            document_id=row.document_id,
            topic_id=row.topic_id,
            chunk_text=row.chunk_text,
            chunk_index=row.chunk_index,
            document_title=row.document_title,
            topic_title=row.topic_title,
            similarity=row.similarity,
            text_rank=row.text_rank,
            vector_rank=row.vector_rank,
            lexical_rank=row.lexical_rank,
            fused_score=rrf_score(
                row.vector_rank,
                row.lexical_rank,
                k=k,
                vector_weight=vector_weight,
                lexical_weight=lexical_weight,
            ),
        )
        for row in merged.values()
    ]
    results.sort(key=ranking_key)
    return results
