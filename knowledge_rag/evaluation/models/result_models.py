"""
Retrieval evaluation result data classes.

- CaseResult: Outcome of one evaluation case
- RetrievalEvalReport: Aggregate recall@k / MRR with per-case detail
"""

from dataclasses import dataclass, field


@dataclass
class CaseResult:
    """Outcome of a single evaluation case."""

    query: str
    topic_id: str
    hit: bool
    first_hit_rank: int | None = None
    top_preview: str | None = None

    def to_dict(self) -> dict:
        return {
            "query": self.query,
            "topic_id": self.topic_id,
            "hit": self.hit,
            "first_hit_rank": self.first_hit_rank,
            "top_preview": self.top_preview,
        }


@dataclass
class RetrievalEvalReport:
    """Aggregate retrieval evaluation results.

    All scores are normalized to 0-1 range.
    """

    cases: int
    top_k: int
    recall_at_k: float = 0.0
    mrr: float = 0.0
    detailed: list[CaseResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "cases": self.cases,
            "top_k": self.top_k,
            "recall_at_k": round(self.recall_at_k, 3),
            "mrr": round(self.mrr, 3),
            "detailed": [case.to_dict() for case in self.detailed],
        }
