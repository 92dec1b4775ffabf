"""
Retrieval evaluation cases.

Schema (JSON list):
- topic_id: Topic to search
- query: User question
- expected_keywords: A retrieved chunk containing any of these counts as a hit

Usage:
    ds = RetrievalEvalDataset.from_json("retrieval_eval_cases.json")
    for case in ds.cases:
        print(case.query, case.expected_keywords)

IMPORTANT: Development-only code. Not for production.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

from knowledge_rag.core.exceptions import InvalidQueryError

logger = logging.getLogger(__name__)


@dataclass
class RetrievalEvalCase:
    """Single retrieval evaluation case."""

    topic_id: str
    query: str
    expected_keywords: list[str]

    def __post_init__(self) -> None:
        if (
            not self.topic_id
            or not self.query
            or not isinstance(self.expected_keywords, list)
            or not self.expected_keywords
        ):
            raise InvalidQueryError(
                "Invalid eval case: each case needs topic_id, query, expected_keywords[]",
                field="case",
                details={"query": self.query, "topic_id": self.topic_id},
            )

    def to_dict(self) -> dict:
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> "RetrievalEvalCase":
        return RetrievalEvalCase(
            topic_id=data.get("topic_id", ""),
            query=data.get("query", ""),
            expected_keywords=data.get("expected_keywords") or [],
        )


@dataclass
class RetrievalEvalDataset:
    """Container for retrieval evaluation cases."""

    cases: list[RetrievalEvalCase] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.cases)

    @staticmethod
    def from_json(path: str | Path) -> "RetrievalEvalDataset":
        """
        Load cases from a JSON file.

        Raises:
            InvalidQueryError: File holds no cases or a case is invalid
        """
        content = Path(path).read_text(encoding="utf-8")
        parsed = json.loads(content)
        if not isinstance(parsed, list) or not parsed:
            raise InvalidQueryError(f"No eval cases found in {path}", field="cases")

        dataset = RetrievalEvalDataset(cases=[RetrievalEvalCase.from_dict(item) for item in parsed])
        logger.info(f"{__name__}:from_json - Loaded {len(dataset)} cases from {path}")
        return dataset
