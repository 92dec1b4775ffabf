"""
Retrieval metrics calculator.

Keyword-hit metrics: a retrieved chunk is relevant when it contains any of
the expected keywords (case-insensitive).
- Recall@K: share of queries with at least one relevant chunk in the top K
- Mean Reciprocal Rank (MRR): mean of 1 / rank of the first relevant chunk

IMPORTANT: Development-only code. Not for production.
"""


class MetricsCalculator:
    """Calculate retrieval evaluation metrics.

    All methods are static and can be called without instantiation.
    """

    @staticmethod
    def keyword_hit(text: str, keywords: list[str]) -> bool:
        lower = text.lower()
        return any(keyword.lower() in lower for keyword in keywords)

    @staticmethod
    def first_hit_rank(retrieved_texts: list[str], keywords: list[str]) -> int | None:
        """1-based rank of the first retrieved text containing a keyword, or None."""
        for rank, text in enumerate(retrieved_texts, start=1):
            if MetricsCalculator.keyword_hit(text, keywords):
                return rank
        return None

    @staticmethod
    def recall_at_k(first_hit_ranks: list[int | None], k: int) -> float:
        """Share of queries whose first hit is within the top k."""
        if not first_hit_ranks:
            return 0.0
        hits = sum(1 for rank in first_hit_ranks if rank is not None and rank <= k)
        return hits / len(first_hit_ranks)

    @staticmethod
    def mean_reciprocal_rank(first_hit_ranks: list[int | None]) -> float:
        """Mean of 1/rank over queries; a miss contributes 0."""
        if not first_hit_ranks:
            return 0.0
        return sum(1.0 / rank for rank in first_hit_ranks if rank) / len(first_hit_ranks)
